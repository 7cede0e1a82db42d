"""
Backend client for the Namespace API.

This module provides an async client for the off-chain service that owns
listings, mint eligibility, pricing and mint signatures. The client only
shapes requests and parses responses; it never recomputes the backend's
judgements and never retries.

Endpoints:
- GET  /api/v1/listings/single?namehash=&network=
- POST /api/v1/mint/simulate?minterAddress=
- POST /api/v1/mint, /api/v1/mint/verified
- POST /api/v1/mint/l2, /api/v1/mint/l2/verified
- POST /auth
- GET  /nonce
"""

from typing import Any, Optional, Union

import httpx

from .audit_logger import AuditLogger
from .enums import ListingType, MintPath
from .exceptions import MintDeniedError, NotFoundError, VerificationRequiredError
from .mint_policy import MintDecisionEngine
from .models import (
    AuthToken,
    AuthTokenRequest,
    AuthTokenResponse,
    L1MintParamsRequest,
    L1MintParamsResponse,
    L2MintParamsRequest,
    L2MintParamsResponse,
    Listing,
    SimulateMintRequest,
    SimulateMintResponse,
)
from .names import namehash_hex

COMPONENT = "NamespaceApiClient"


class NamespaceApiClient:
    """
    Async client for the Namespace backend.

    HTTP errors other than a missing listing, and transport errors, are
    raised as httpx exceptions without being wrapped.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        logger: Optional[AuditLogger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        decision_engine: Optional[MintDecisionEngine] = None,
    ) -> None:
        """
        Initialize the backend client.

        Args:
            base_url: Backend base URL (e.g. https://api.namespace.ninja)
            timeout: Request timeout in seconds
            logger: Optional audit logger
            transport: Optional httpx transport (used for testing)
            decision_engine: Optional mint decision engine
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._logger = logger
        self._transport = transport
        self._decision_engine = decision_engine or MintDecisionEngine()
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "NamespaceApiClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def _get(self, path: str, params: Optional[dict] = None) -> httpx.Response:
        client = self._ensure_client()
        self._debug(f"GET {path}", {"params": params or {}})
        return await client.get(path, params=params)

    async def _post(
        self,
        path: str,
        payload: dict,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> Any:
        client = self._ensure_client()
        self._debug(f"POST {path}", {"params": params or {}, "headers": headers or {}})
        response = await client.post(path, json=payload, params=params, headers=headers)
        response.raise_for_status()
        return response.json()

    async def get_listed_name(self, name: str, network: str) -> Listing:
        """
        Fetch the listing of a parent name.

        Args:
            name: Full parent name (e.g. 'example.eth')
            network: L1 chain name the listing lives on

        Raises:
            NotFoundError: If the name is not listed
        """
        response = await self._get(
            "/api/v1/listings/single",
            params={"namehash": namehash_hex(name), "network": network},
        )
        if response.status_code == 404:
            raise NotFoundError(
                code="listing_not_found",
                message=f"Name is not listed: {name}",
                details={"name": name, "network": network},
            )
        response.raise_for_status()
        body = response.json()
        if not body:
            raise NotFoundError(
                code="listing_not_found",
                message=f"Name is not listed: {name}",
                details={"name": name, "network": network},
            )
        return Listing.from_dict(body)

    async def simulate_mint(self, request: SimulateMintRequest) -> SimulateMintResponse:
        """Ask the backend whether the mint is allowed and what it costs."""
        body = await self._post(
            "/api/v1/mint/simulate",
            request.to_dict(),
            params={"minterAddress": request.minter},
        )
        return SimulateMintResponse.from_dict(body)

    async def get_l1_mint_parameters(
        self,
        request: L1MintParamsRequest,
        minter_address: str,
        token: Union[str, AuthToken, None] = None,
    ) -> L1MintParamsResponse:
        """
        Get backend-signed parameters for an L1 mint.

        Raises:
            MintDeniedError: If the simulation denies the mint
            VerificationRequiredError: If a token is required but missing
        """
        simulation_request = SimulateMintRequest(
            label=request.label,
            parent_label=request.parent_label,
            network=request.network,
            minter=minter_address,
            subname_owner=request.subname_owner,
        )
        body = await self._negotiate_then_authorize(
            ListingType.L1, request.to_dict(), simulation_request, token
        )
        return L1MintParamsResponse.from_dict(body)

    async def get_l2_mint_parameters(
        self,
        request: L2MintParamsRequest,
        minter_address: str,
        token: Union[str, AuthToken, None] = None,
    ) -> L2MintParamsResponse:
        """
        Get backend-signed parameters for an L2 mint.

        Raises:
            MintDeniedError: If the simulation denies the mint
            VerificationRequiredError: If a token is required but missing
        """
        simulation_request = SimulateMintRequest(
            label=request.label,
            parent_label=request.parent_label,
            network=request.main_network,
            minter=minter_address,
            subname_owner=request.owner,
        )
        body = await self._negotiate_then_authorize(
            ListingType.L2, request.to_dict(), simulation_request, token
        )
        return L2MintParamsResponse.from_dict(body)

    async def _negotiate_then_authorize(
        self,
        listing_type: ListingType,
        payload: dict,
        simulation_request: SimulateMintRequest,
        token: Union[str, AuthToken, None],
    ) -> dict:
        """Simulate, route through the decision table, then request parameters."""
        auth_token = AuthToken.coerce(token)
        simulation = await self.simulate_mint(simulation_request)
        route = self._decision_engine.route(listing_type, simulation, auth_token)

        self._info(
            "Mint simulation evaluated",
            {
                "label": simulation_request.label,
                "parent_label": simulation_request.parent_label,
                "listing_type": listing_type.value,
                "path": route.path.value,
            },
        )

        if route.path == MintPath.DENIED:
            raise MintDeniedError(simulation.denied_reason, simulation.validation_errors)
        if route.path == MintPath.VERIFICATION_REQUIRED:
            raise VerificationRequiredError(simulation_request.label)

        return await self._post(route.endpoint, payload, headers=dict(route.headers))

    async def get_auth_token(self, request: AuthTokenRequest) -> AuthTokenResponse:
        """Exchange a signed sign-in message for session tokens."""
        body = await self._post("/auth", request.to_dict())
        return AuthTokenResponse.from_dict(body)

    async def get_nonce(self) -> str:
        """Fetch a backend-issued sign-in nonce."""
        response = await self._get("/nonce")
        response.raise_for_status()
        body = response.json()
        if isinstance(body, dict):
            return str(body["nonce"])
        return str(body)

    def _debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug(COMPONENT, message, data)

    def _info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.info(COMPONENT, message, data)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
