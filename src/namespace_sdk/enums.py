"""
Enumeration types for the Namespace SDK.

These enums provide type-safe constants for listing kinds, mint decisions,
token kinds, contract roles and configuration options.
"""

from enum import Enum


class ListingType(Enum):
    """Kind of listing; decides whether a mint happens on L1 or on an L2."""

    L1 = "sellUnruggable"
    L2 = "l2"


class Mode(Enum):
    """Backend environment."""

    PRODUCTION = "production"
    STAGING = "staging"


class TokenKind(Enum):
    """Kind of bearer credential; decides which auth header is sent."""

    CURRENT = "current"
    LEGACY = "legacy"


class MintPath(Enum):
    """Outcome of the mint decision table."""

    DENIED = "denied"
    VERIFICATION_REQUIRED = "verification_required"
    VERIFIED = "verified"
    STANDARD = "standard"


class MintDeniedReason(Enum):
    """Reason codes reported by the backend simulation."""

    SUBNAME_TAKEN = "SUBNAME_TAKEN"
    MINTER_NOT_TOKEN_OWNER = "MINTER_NOT_TOKEN_OWNER"
    MINTER_NOT_WHITELISTED = "MINTER_NOT_WHITELISTED"
    LISTING_EXPIRED = "LISTING_EXPIRED"
    SUBNAME_RESERVED = "SUBNAME_RESERVED"
    VERIFIED_MINTER_ADDRESS_REQUIRED = "VERIFIED_MINTER_ADDRESS_REQUIRED"
    UNKNOWN_REASON = "UNKNOWN_REASON"


class L2ControllerVersion(Enum):
    """Deployed L2 controller generation targeted by the client."""

    LEGACY = "legacy"
    V1 = "v1"
    V2 = "v2"


class ContractRole(Enum):
    """Role of a deployed contract in the per-chain address tables."""

    MINT_CONTROLLER = "mint_controller"
    LIST_CONTROLLER = "list_controller"
    L2_CONTROLLER = "l2_controller"
    L2_CONTROLLER_V2 = "l2_controller_v2"
    L2_RESOLVER = "l2_resolver"
    L2_REGISTRY_RESOLVER = "l2_registry_resolver"
    L2_EMITTER = "l2_emitter"
    L2_LEGACY_CONTROLLER = "l2_legacy_controller"
    L2_LEGACY_FACTORY = "l2_legacy_factory"
    L2_LEGACY_MANAGER = "l2_legacy_manager"
    L2_LEGACY_RESOLVER = "l2_legacy_resolver"
    ENS_REGISTRY = "ens_registry"
    ENS_WRAPPER = "ens_wrapper"
    OFFCHAIN_RESOLVER = "offchain_resolver"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
