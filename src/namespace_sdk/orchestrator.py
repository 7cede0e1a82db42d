"""
Mint Orchestrator for the Namespace SDK.

This module provides NamespaceClient, the entry point applications use. It
coordinates:
- chain validation against the listing's required chain
- eligibility simulation and parameter negotiation with the backend
- resolver record encoding
- transaction building or submission through the chain gateway
- sign-in token generation

Every public call is one sequential chain of awaits; the client keeps no
state between calls beyond its configuration and gateways.
"""

import inspect
import secrets
import time
from dataclasses import replace
from typing import Awaitable, Callable, Optional, Union

from eth_account.signers.local import LocalAccount

from .audit_logger import AuditLogger
from .backend_client import NamespaceApiClient
from .chain_client import ChainGateway
from .chain_registry import ChainRegistry
from .config import ClientConfig
from .enums import L2ControllerVersion
from .exceptions import ChainMismatchError, NamespaceError, UnsupportedChainError
from .models import (
    AuthTokenMessage,
    AuthTokenRequest,
    AuthTokenResponse,
    L1MintParamsRequest,
    L2MintParamsRequest,
    Listing,
    MintRequest,
    MintTransactionParameters,
    SetRecordsRequest,
    SimulateMintRequest,
    SimulateMintResponse,
)
from .names import namehash_hex, validate_label

COMPONENT = "NamespaceClient"

DEFAULT_SIGN_IN_MESSAGE = "Please Sign In"

SignFunction = Callable[[AuthTokenMessage], Union[str, Awaitable[str]]]


def generate_nonce() -> str:
    """Fresh 256-bit sign-in nonce from the OS CSPRNG, 0x-prefixed hex."""
    return "0x" + secrets.token_bytes(32).hex()


class NamespaceClient:
    """
    Client for minting subnames of Namespace listings.

    Usage:
        async with NamespaceClient(ClientConfig(chain_id=1), account=acct) as client:
            listing = await client.get_listed_name("example.eth")
            tx_hash = await client.mint(listing, MintRequest("alice", acct.address))
    """

    def __init__(
        self,
        config: ClientConfig,
        account: Optional[LocalAccount] = None,
        backend: Optional[NamespaceApiClient] = None,
        chain: Optional[ChainGateway] = None,
        registry: Optional[ChainRegistry] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration
            account: Optional signing account; without it the client is read-only
            backend: Optional backend client (built from config if omitted)
            chain: Optional chain gateway (built from config if omitted)
            registry: Optional chain registry
            logger: Optional audit logger (built from config.logging if omitted)
        """
        self._config = config
        self._registry = registry or ChainRegistry()
        self._logger = logger or AuditLogger.from_config(config.logging)

        # Fail fast on an unsupported configured chain
        self._registry.name_for_chain_id(config.chain_id)

        self._backend = backend or NamespaceApiClient(
            base_url=config.backend_api_url,
            timeout=config.http_timeout,
            logger=self._logger,
        )
        self._chain = chain or ChainGateway(
            chain_id=config.chain_id,
            registry=self._registry,
            rpc_url=config.rpc_url,
            account=account,
            mint_source=config.mint_source,
            l2_controller_version=config.l2_controller_version,
            logger=self._logger,
        )

    async def __aenter__(self) -> "NamespaceClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def chain_id(self) -> int:
        return self._config.chain_id

    @property
    def backend(self) -> NamespaceApiClient:
        return self._backend

    @property
    def chain(self) -> ChainGateway:
        return self._chain

    async def close(self) -> None:
        await self._backend.close()

    def required_chain_id(self, listing: Listing) -> int:
        """Chain a listing's subnames are minted on."""
        if listing.is_l2:
            return self._registry.chain_id_for_name(listing.l2_network or "")
        return self._registry.chain_id_for_name(listing.network)

    def _ensure_valid_chain_for_listing(self, listing: Listing) -> int:
        required = self.required_chain_id(listing)
        if required != self._config.chain_id:
            error = ChainMismatchError(listing.full_name, required, self._config.chain_id)
            self._log_error("Chain mismatch", error, {"listing": listing.full_name})
            raise error
        return required

    async def get_listed_name(self, name: str, chain_id: Optional[int] = None) -> Listing:
        """
        Fetch the listing of a parent name.

        Args:
            name: Full parent name (e.g. 'example.eth')
            chain_id: L1 chain the listing lives on; defaults to the configured
                chain, or the L1 it settles on when that is an L2

        Raises:
            UnsupportedChainError: If the chain id is unknown or is an L2 chain
            NotFoundError: If the name is not listed
        """
        if chain_id is None:
            configured = self._registry.name_for_chain_id(self._config.chain_id)
            network = self._registry.l1_chain_for(configured)
        else:
            network = self._registry.name_for_chain_id(chain_id)
            if not self._registry.is_l1_chain(network):
                error = UnsupportedChainError(
                    code="not_l1_chain",
                    message=f"Listings are looked up on an L1 chain, got: {network}",
                    details={"chain_id": chain_id, "chain": network},
                )
                self._log_error("Listing lookup failed", error, {"name": name})
                raise error
        return await self._backend.get_listed_name(name, network)

    async def get_mint_details(
        self,
        listing: Listing,
        subname_label: str,
        minter_address: str,
    ) -> SimulateMintResponse:
        """Eligibility and price for minting subname_label, owned by the minter."""
        subname_label = validate_label(subname_label)
        return await self._backend.simulate_mint(SimulateMintRequest(
            label=subname_label,
            parent_label=listing.label,
            network=listing.network,
            minter=minter_address,
            subname_owner=minter_address,
        ))

    async def is_subname_available(self, listing: Listing, subname_label: str) -> bool:
        """
        Check on chain whether label.listing is still free.

        Raises:
            ChainMismatchError: If the configured chain is not the listing's
            InvalidSubnameError: If the label is malformed
        """
        subname_label = validate_label(subname_label)
        chain_id = self._ensure_valid_chain_for_listing(listing)
        full_subname = f"{subname_label}.{listing.full_name}"

        if listing.is_l2:
            return await self._chain.is_l2_subname_available(full_subname, chain_id)
        return await self._chain.is_l1_subname_available(full_subname, chain_id)

    async def get_mint_transaction_parameters(
        self,
        listing: Listing,
        mint_request: MintRequest,
    ) -> MintTransactionParameters:
        """
        Negotiate mint parameters and return the simulated transaction.

        The result carries everything needed to submit the mint externally.

        Raises:
            ChainMismatchError: Before any backend call, on a chain mismatch
            MintDeniedError: If the backend denies the mint
            VerificationRequiredError: If a token is required but missing
        """
        mint_request = replace(mint_request, subname_label=validate_label(mint_request.subname_label))
        self._ensure_valid_chain_for_listing(listing)
        return await self._run_mint(listing, mint_request, submit=False)

    async def mint(self, listing: Listing, mint_request: MintRequest) -> str:
        """
        Negotiate mint parameters, sign and submit the mint.

        Returns:
            Transaction hash, 0x-prefixed hex

        Raises:
            WalletNotConnectedError: If the client has no account
        """
        mint_request = replace(mint_request, subname_label=validate_label(mint_request.subname_label))
        self._ensure_valid_chain_for_listing(listing)
        return await self._run_mint(listing, mint_request, submit=True)

    async def _run_mint(
        self,
        listing: Listing,
        mint_request: MintRequest,
        submit: bool,
    ) -> Union[str, MintTransactionParameters]:
        full_subname = f"{mint_request.subname_label}.{listing.full_name}"
        records = None
        if mint_request.records is not None:
            records = SetRecordsRequest.from_mint_records(full_subname, mint_request.records)

        self._info(
            "Mint started",
            {
                "subname": full_subname,
                "listing_type": listing.listing_type.value,
                "minter": mint_request.minter_address,
                "submit": submit,
            },
        )

        try:
            if listing.is_l2:
                params = await self._backend.get_l2_mint_parameters(
                    L2MintParamsRequest(
                        label=mint_request.subname_label,
                        parent_label=listing.label,
                        parent_node=namehash_hex(listing.full_name),
                        owner=mint_request.owner,
                        main_network=listing.network,
                        registry_network=listing.l2_network or "",
                        expiry_in_years=mint_request.expiry_in_years,
                        use_v2=self._config.l2_controller_version == L2ControllerVersion.V2 or None,
                        minter_address=mint_request.minter_address,
                    ),
                    mint_request.minter_address,
                    mint_request.token,
                )
                l2_chain = listing.l2_network or ""
                if submit:
                    result = await self._chain.mint_l2(params, l2_chain, records)
                else:
                    result = await self._chain.build_l2_mint(
                        params, l2_chain, mint_request.minter_address, records
                    )
            else:
                params = await self._backend.get_l1_mint_parameters(
                    L1MintParamsRequest(
                        label=mint_request.subname_label,
                        parent_label=listing.label,
                        subname_owner=mint_request.owner,
                        network=listing.network,
                    ),
                    mint_request.minter_address,
                    mint_request.token,
                )
                if submit:
                    result = await self._chain.mint_l1(params, listing.network, records)
                else:
                    result = await self._chain.build_l1_mint(
                        params, listing.network, mint_request.minter_address, records
                    )
        except NamespaceError as e:
            self._log_error("Mint failed", e, {"subname": full_subname})
            raise

        self._info("Mint completed", {"subname": full_subname, "submit": submit})
        return result

    async def generate_auth_token(
        self,
        principal: str,
        sign_fn: Optional[SignFunction] = None,
        message: Optional[str] = None,
    ) -> AuthTokenResponse:
        """
        Sign a sign-in message and exchange it for session tokens.

        Args:
            principal: Address signing in
            sign_fn: Optional signer, sync or async, returning a signature hex;
                defaults to the client's account
            message: Sign-in text, 'Please Sign In' by default

        Raises:
            WalletNotConnectedError: If neither sign_fn nor an account is available
        """
        auth_message = AuthTokenMessage(
            app=self._config.mint_source,
            issued=int(time.time() * 1000),
            message=message or DEFAULT_SIGN_IN_MESSAGE,
            nonce=generate_nonce(),
            principal=principal,
        )

        if sign_fn is None:
            signature = self._chain.sign_auth_message(auth_message)
        else:
            signature = sign_fn(auth_message)
            if inspect.isawaitable(signature):
                signature = await signature

        self._info("Sign-in message signed", {"principal": principal, "app": auth_message.app})
        return await self._backend.get_auth_token(
            AuthTokenRequest(message=auth_message, signature=signature)
        )

    def _info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.info(COMPONENT, message, data)

    def _log_error(self, message: str, error: Exception, data: dict) -> None:
        if self._logger:
            self._logger.log_error(COMPONENT, message, error, data)
