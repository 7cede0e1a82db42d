"""
Decision tables for the mint flow.

Every combination of listing kind, simulation verdict and token presence or
kind maps to exactly one mint path, endpoint and header set. The tables are
plain data so each combination can be enumerated and tested.

Rules:
- can_mint false -> DENIED, whatever else the simulation says
- verification required, no token -> VERIFICATION_REQUIRED
- verification required, token -> VERIFIED endpoint with one auth header
- otherwise -> STANDARD endpoint, no auth header
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from .enums import ListingType, MintPath, TokenKind
from .models import AuthToken, SimulateMintResponse

# (can_mint, requires_verified_minter, has_token) -> path
MINT_DECISION_TABLE: Mapping[tuple[bool, bool, bool], MintPath] = MappingProxyType({
    (False, False, False): MintPath.DENIED,
    (False, False, True): MintPath.DENIED,
    (False, True, False): MintPath.DENIED,
    (False, True, True): MintPath.DENIED,
    (True, True, False): MintPath.VERIFICATION_REQUIRED,
    (True, True, True): MintPath.VERIFIED,
    (True, False, False): MintPath.STANDARD,
    (True, False, True): MintPath.STANDARD,
})

MINT_ENDPOINTS: Mapping[tuple[ListingType, MintPath], str] = MappingProxyType({
    (ListingType.L1, MintPath.STANDARD): "/api/v1/mint",
    (ListingType.L1, MintPath.VERIFIED): "/api/v1/mint/verified",
    (ListingType.L2, MintPath.STANDARD): "/api/v1/mint/l2",
    (ListingType.L2, MintPath.VERIFIED): "/api/v1/mint/l2/verified",
})

TOKEN_HEADERS: Mapping[TokenKind, str] = MappingProxyType({
    TokenKind.LEGACY: "authorization",
    TokenKind.CURRENT: "x-auth-token",
})


@dataclass(frozen=True)
class MintRoute:
    """Where and how mint parameters are requested."""

    path: MintPath
    endpoint: Optional[str]
    headers: Mapping[str, str]


class MintDecisionEngine:
    """Maps a simulation verdict and an optional token to a mint route."""

    def decide(
        self,
        simulation: SimulateMintResponse,
        token: Optional[AuthToken],
    ) -> MintPath:
        key = (
            bool(simulation.can_mint),
            bool(simulation.requires_verified_minter),
            token is not None,
        )
        return MINT_DECISION_TABLE[key]

    def auth_headers(self, token: AuthToken) -> dict[str, str]:
        """Exactly one header: bearer authorization for legacy tokens, x-auth-token otherwise."""
        header = TOKEN_HEADERS[token.kind]
        if token.kind == TokenKind.LEGACY:
            return {header: f"Bearer {token.value}"}
        return {header: token.value}

    def route(
        self,
        listing_type: ListingType,
        simulation: SimulateMintResponse,
        token: Optional[AuthToken],
    ) -> MintRoute:
        """
        Resolve the full route for a mint attempt.

        DENIED and VERIFICATION_REQUIRED routes have no endpoint; callers stop
        there.
        """
        path = self.decide(simulation, token)
        endpoint = MINT_ENDPOINTS.get((listing_type, path))
        headers: Mapping[str, str] = {}
        if path == MintPath.VERIFIED:
            headers = self.auth_headers(token)
        return MintRoute(path=path, endpoint=endpoint, headers=MappingProxyType(dict(headers)))
