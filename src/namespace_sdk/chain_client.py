"""
Chain gateway for Namespace contracts.

This module wraps an AsyncWeb3 instance for the configured chain:
- subname availability reads (ENS registry on L1, controllers on L2)
- mint call simulation, returning transaction parameters for external
  submission, or signing and submitting with the connected account
- EIP-712 signing of sign-in messages

Contract addresses come from the ChainRegistry; contracts that are not
deployed on a chain fail fast before any RPC call.
"""

from typing import Any, Optional

from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import to_bytes, to_checksum_address, to_hex
from web3 import AsyncHTTPProvider, AsyncWeb3

from .abi import (
    ENS_REGISTRY_ABI,
    L1_MINT_CONTROLLER_ABI,
    L2_AVAILABILITY_ABI,
    L2_CONTROLLER_ABI,
    L2_CONTROLLER_V2_ABI,
    L2_LEGACY_OWNER_ABI,
)
from .audit_logger import AuditLogger
from .chain_registry import ChainRegistry
from .config import DEFAULT_MINT_SOURCE, ZERO_ADDRESS
from .enums import ContractRole, L2ControllerVersion
from .exceptions import UnsupportedChainError, WalletNotConnectedError
from .models import (
    AuthTokenMessage,
    L1MintParamsResponse,
    L2MintParamsResponse,
    MintTransactionParameters,
    SetRecordsRequest,
)
from .names import labelhash, namehash, split_subname
from .records import records_to_call_data

COMPONENT = "ChainGateway"

AUTH_TYPED_DATA_DOMAIN = {
    "name": "Namespace",
    "version": "1",
}

AUTH_TYPED_DATA_TYPES = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
    ],
    "SignIn": [
        {"name": "principal", "type": "string"},
        {"name": "nonce", "type": "string"},
        {"name": "app", "type": "string"},
        {"name": "issued", "type": "uint64"},
        {"name": "message", "type": "string"},
    ],
}

AUTH_PRIMARY_TYPE = "SignIn"


def auth_typed_data(message: AuthTokenMessage) -> dict:
    """Full EIP-712 payload for a sign-in message."""
    return {
        "types": AUTH_TYPED_DATA_TYPES,
        "primaryType": AUTH_PRIMARY_TYPE,
        "domain": dict(AUTH_TYPED_DATA_DOMAIN),
        "message": message.to_dict(),
    }


def _bytes32(value: str) -> bytes:
    return to_bytes(hexstr=value).rjust(32, b"\x00")


class ChainGateway:
    """
    On-chain reads and writes for one configured chain.

    Without an account the gateway is read-only: availability checks and
    building transaction parameters work, submitting and signing do not.
    """

    def __init__(
        self,
        chain_id: int,
        registry: Optional[ChainRegistry] = None,
        rpc_url: Optional[str] = None,
        account: Optional[LocalAccount] = None,
        mint_source: Optional[str] = None,
        l2_controller_version: L2ControllerVersion = L2ControllerVersion.V1,
        logger: Optional[AuditLogger] = None,
        w3: Optional[AsyncWeb3] = None,
    ) -> None:
        """
        Initialize the chain gateway.

        Args:
            chain_id: Chain the gateway talks to
            registry: Chain registry (defaults to the built-in tables)
            rpc_url: RPC endpoint; defaults to the chain's public RPC
            account: Optional signing account
            mint_source: Attribution tag sent with L2 mints
            l2_controller_version: Which L2 controller generation to target
            logger: Optional audit logger
            w3: Optional pre-built AsyncWeb3 (used for testing)
        """
        self._registry = registry or ChainRegistry()
        self._chain_id = chain_id
        self._chain_name = self._registry.name_for_chain_id(chain_id)
        self._account = account
        self._mint_source = mint_source or DEFAULT_MINT_SOURCE
        self._l2_version = l2_controller_version
        self._logger = logger
        if w3 is None:
            url = rpc_url or self._registry.default_rpc_url(self._chain_name)
            w3 = AsyncWeb3(AsyncHTTPProvider(url))
        self._w3 = w3

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def chain_name(self) -> str:
        return self._chain_name

    @property
    def is_read_only(self) -> bool:
        return self._account is None

    @property
    def mint_source(self) -> str:
        return self._mint_source

    def _contract(self, address: str, abi: list[dict]) -> Any:
        return self._w3.eth.contract(address=to_checksum_address(address), abi=abi)

    def _require_account(self, operation: str) -> LocalAccount:
        if self._account is None:
            raise WalletNotConnectedError(operation)
        return self._account

    def _require_chain_kind(self, chain_id: int, l2: bool) -> str:
        chain_name = self._registry.name_for_chain_id(chain_id)
        matches = self._registry.is_l2_chain(chain_name) if l2 else self._registry.is_l1_chain(chain_name)
        if not matches:
            kind = "L2" if l2 else "L1"
            raise UnsupportedChainError(
                code="unsupported_chain",
                message=f"{kind} subname availability not supported for chain: {chain_id}",
                details={"chain_id": chain_id, "chain": chain_name},
            )
        return chain_name

    async def is_l1_subname_available(self, full_name: str, chain_id: int) -> bool:
        """
        Check an L1 subname against the ENS registry.

        The subname is available iff its registry owner is the zero address.
        """
        chain_name = self._require_chain_kind(chain_id, l2=False)
        registry_address = self._registry.require_contract(chain_name, ContractRole.ENS_REGISTRY)
        registry = self._contract(registry_address, ENS_REGISTRY_ABI)

        owner = await registry.functions.owner(namehash(full_name)).call()
        available = str(owner).lower() == ZERO_ADDRESS
        self._debug("L1 availability read", {"name": full_name, "owner": owner, "available": available})
        return available

    async def is_l2_subname_available(self, full_name: str, chain_id: int) -> bool:
        """
        Check an L2 subname against the Namespace controller.

        Current controllers answer isNodeAvailable(label, parentNode), where
        the parent is everything after the first label. Legacy controllers
        only accept label.parent.tld and are asked for the subnode owner,
        available iff it is the zero address.

        Raises:
            InvalidSubnameError: If the name cannot be split
            UnsupportedChainError: If the chain has no controller deployed
        """
        chain_name = self._require_chain_kind(chain_id, l2=True)

        if self._l2_version == L2ControllerVersion.LEGACY:
            label, parent = split_subname(full_name, strict=True)
            address = self._registry.require_contract(chain_name, ContractRole.L2_LEGACY_CONTROLLER)
            controller = self._contract(address, L2_LEGACY_OWNER_ABI)
            owner = await controller.functions.subnodeOwner(namehash(parent), labelhash(label)).call()
            available = str(owner).lower() == ZERO_ADDRESS
        else:
            label, parent = split_subname(full_name)
            address = self._registry.require_contract(chain_name, ContractRole.L2_CONTROLLER)
            controller = self._contract(address, L2_AVAILABILITY_ABI)
            available = bool(await controller.functions.isNodeAvailable(label, namehash(parent)).call())

        self._debug(
            "L2 availability read",
            {"name": full_name, "controller_version": self._l2_version.value, "available": available},
        )
        return available

    def _l1_mint_call(
        self,
        params: L1MintParamsResponse,
        chain: str,
        records: Optional[SetRecordsRequest],
    ) -> tuple[str, list[dict], str, tuple, int]:
        address = self._registry.require_contract(chain, ContractRole.MINT_CONTROLLER)
        p = params.parameters
        resolver_data = records_to_call_data(records) if records else []

        context = (
            p.subname_label,
            _bytes32(p.parent_node),
            to_checksum_address(p.resolver),
            to_checksum_address(p.subname_owner),
            p.fuses,
            int(p.mint_price),
            int(p.mint_fee),
            p.expiry,
            p.ttl,
        )
        signature = to_bytes(hexstr=params.signature)

        if resolver_data:
            return address, L1_MINT_CONTROLLER_ABI, "mintWithData", (context, signature, resolver_data), p.total_price
        return address, L1_MINT_CONTROLLER_ABI, "mint", (context, signature), p.total_price

    def _l2_mint_call(
        self,
        params: L2MintParamsResponse,
        l2_chain: str,
        records: Optional[SetRecordsRequest],
    ) -> tuple[str, list[dict], str, tuple, int]:
        p = params.parameters
        resolver_data = records_to_call_data(records) if records else []

        context = [
            p.label,
            _bytes32(p.parent_node),
            resolver_data,
            to_checksum_address(p.owner),
            int(p.price),
            int(p.fee),
            to_checksum_address(p.payment_receiver),
            p.expiry,
            _bytes32(p.nonce),
        ]

        if self._l2_version == L2ControllerVersion.V2:
            address = self._registry.require_contract(l2_chain, ContractRole.L2_CONTROLLER_V2)
            abi = L2_CONTROLLER_V2_ABI
            context.append(to_checksum_address(p.verified_minter or ZERO_ADDRESS))
            context.append(int(p.signature_expiry or 0))
        else:
            address = self._registry.require_contract(l2_chain, ContractRole.L2_CONTROLLER)
            abi = L2_CONTROLLER_ABI

        extra_data = self._mint_source.encode("utf-8")
        args = (tuple(context), to_bytes(hexstr=params.signature), extra_data)
        return address, abi, "mint", args, p.total_price

    async def _simulate(
        self,
        address: str,
        abi: list[dict],
        function_name: str,
        args: tuple,
        value: int,
        sender: str,
    ) -> MintTransactionParameters:
        """eth_call the mint with its value; reverts surface as web3 errors."""
        contract = self._contract(address, abi)
        function = contract.get_function_by_name(function_name)(*args)
        await function.call({"from": to_checksum_address(sender), "value": value})

        data = contract.encode_abi(function_name, args=list(args))
        self._info(
            "Mint call simulated",
            {"contract": address, "function": function_name, "value": value, "chain_id": self._chain_id},
        )
        return MintTransactionParameters(
            abi=abi,
            contract_address=to_checksum_address(address),
            function_name=function_name,
            args=args,
            value=value,
            chain_id=self._chain_id,
            data=data if isinstance(data, str) else to_hex(data),
        )

    async def build_l1_mint(
        self,
        params: L1MintParamsResponse,
        chain: str,
        sender: str,
        records: Optional[SetRecordsRequest] = None,
    ) -> MintTransactionParameters:
        """
        Simulate an L1 mint and return its transaction parameters.

        mint(context, signature) without records, mintWithData(context,
        signature, resolverData) with records; value = mintFee + mintPrice.
        """
        address, abi, function_name, args, value = self._l1_mint_call(params, chain, records)
        return await self._simulate(address, abi, function_name, args, value, sender)

    async def build_l2_mint(
        self,
        params: L2MintParamsResponse,
        l2_chain: str,
        sender: str,
        records: Optional[SetRecordsRequest] = None,
    ) -> MintTransactionParameters:
        """
        Simulate an L2 mint and return its transaction parameters.

        mint(context, signature, extraData) with the resolver data inside the
        context and the mint source tag as extraData; value = fee + price.
        """
        address, abi, function_name, args, value = self._l2_mint_call(params, l2_chain, records)
        return await self._simulate(address, abi, function_name, args, value, sender)

    async def mint_l1(
        self,
        params: L1MintParamsResponse,
        chain: str,
        records: Optional[SetRecordsRequest] = None,
    ) -> str:
        """Simulate, sign and submit an L1 mint; returns the transaction hash."""
        account = self._require_account("write operation")
        tx_params = await self.build_l1_mint(params, chain, account.address, records)
        return await self.submit(tx_params)

    async def mint_l2(
        self,
        params: L2MintParamsResponse,
        l2_chain: str,
        records: Optional[SetRecordsRequest] = None,
    ) -> str:
        """Simulate, sign and submit an L2 mint; returns the transaction hash."""
        account = self._require_account("write operation")
        tx_params = await self.build_l2_mint(params, l2_chain, account.address, records)
        return await self.submit(tx_params)

    async def submit(self, tx_params: MintTransactionParameters) -> str:
        """
        Sign and broadcast simulated transaction parameters.

        Raises:
            WalletNotConnectedError: If no account is configured
        """
        account = self._require_account("write operation")
        contract = self._contract(tx_params.contract_address, tx_params.abi)
        function = contract.get_function_by_name(tx_params.function_name)(*tx_params.args)

        nonce = await self._w3.eth.get_transaction_count(account.address)
        tx = await function.build_transaction({
            "from": account.address,
            "value": tx_params.value,
            "nonce": nonce,
            "chainId": tx_params.chain_id,
        })
        signed_tx = account.sign_transaction(tx)
        tx_hash = await self._w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        tx_hash_hex = to_hex(tx_hash)
        self._info(
            "Mint transaction sent",
            {"tx_hash": tx_hash_hex, "function": tx_params.function_name, "chain_id": tx_params.chain_id},
        )
        return tx_hash_hex

    def sign_auth_message(self, message: AuthTokenMessage) -> str:
        """
        Sign a sign-in message with the connected account (EIP-712).

        Raises:
            WalletNotConnectedError: If no account is configured
        """
        account = self._require_account("token generation")
        signable = encode_typed_data(full_message=auth_typed_data(message))
        signed = account.sign_message(signable)
        return to_hex(signed.signature)

    def _debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug(COMPONENT, message, data)

    def _info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.info(COMPONENT, message, data)
