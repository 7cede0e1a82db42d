"""
Namespace SDK - mint ENS subnames of Namespace listings on L1 and L2 chains.

This package negotiates backend-signed mint parameters, encodes resolver
records and builds or submits the mint transactions for the Namespace
controllers.
"""

__version__ = "0.1.0"
__author__ = "Namespace SDK Team"

from namespace_sdk.exceptions import (
    NamespaceError,
    ChainMismatchError,
    MintDeniedError,
    VerificationRequiredError,
    UnsupportedChainError,
    WalletNotConnectedError,
    InvalidSubnameError,
    NotFoundError,
)
from namespace_sdk.enums import (
    ListingType,
    Mode,
    TokenKind,
    MintPath,
    MintDeniedReason,
    L2ControllerVersion,
    ContractRole,
    LogLevel,
)
from namespace_sdk.config import (
    ZERO_ADDRESS,
    BACKEND_API,
    DEFAULT_MINT_SOURCE,
    L1Contracts,
    L2Contracts,
    L2ContractsLegacy,
    EnsContracts,
    ContractTables,
    LoggingConfig,
    ClientConfig,
    load_config_from_env,
)
from namespace_sdk.models import (
    Listing,
    TextRecord,
    AddressRecord,
    MintRecords,
    AuthToken,
    MintRequest,
    SimulateMintRequest,
    SimulateMintResponse,
    L1MintParamsRequest,
    L1MintParameters,
    L1MintParamsResponse,
    L2MintParamsRequest,
    L2MintParameters,
    L2MintParamsResponse,
    SetRecordsRequest,
    AuthTokenMessage,
    AuthTokenRequest,
    AuthTokenResponse,
    MintTransactionParameters,
)
from namespace_sdk.chain_registry import (
    ChainRegistry,
    DEFAULT_CONTRACT_TABLES,
    L1_CHAINS,
    L2_CHAINS,
)
from namespace_sdk.names import (
    labelhash,
    namehash,
    namehash_hex,
    validate_label,
    split_subname,
)
from namespace_sdk.records import (
    records_to_call_data,
)
from namespace_sdk.mint_policy import (
    MintDecisionEngine,
    MintRoute,
    MINT_DECISION_TABLE,
    MINT_ENDPOINTS,
)
from namespace_sdk.audit_logger import (
    AuditLogger,
    LogEntry,
)
from namespace_sdk.backend_client import (
    NamespaceApiClient,
)
from namespace_sdk.chain_client import (
    ChainGateway,
    auth_typed_data,
)
from namespace_sdk.orchestrator import (
    NamespaceClient,
    generate_nonce,
)

__all__ = [
    # Exceptions
    "NamespaceError",
    "ChainMismatchError",
    "MintDeniedError",
    "VerificationRequiredError",
    "UnsupportedChainError",
    "WalletNotConnectedError",
    "InvalidSubnameError",
    "NotFoundError",
    # Enums
    "ListingType",
    "Mode",
    "TokenKind",
    "MintPath",
    "MintDeniedReason",
    "L2ControllerVersion",
    "ContractRole",
    "LogLevel",
    # Configuration
    "ZERO_ADDRESS",
    "BACKEND_API",
    "DEFAULT_MINT_SOURCE",
    "L1Contracts",
    "L2Contracts",
    "L2ContractsLegacy",
    "EnsContracts",
    "ContractTables",
    "LoggingConfig",
    "ClientConfig",
    "load_config_from_env",
    # Models
    "Listing",
    "TextRecord",
    "AddressRecord",
    "MintRecords",
    "AuthToken",
    "MintRequest",
    "SimulateMintRequest",
    "SimulateMintResponse",
    "L1MintParamsRequest",
    "L1MintParameters",
    "L1MintParamsResponse",
    "L2MintParamsRequest",
    "L2MintParameters",
    "L2MintParamsResponse",
    "SetRecordsRequest",
    "AuthTokenMessage",
    "AuthTokenRequest",
    "AuthTokenResponse",
    "MintTransactionParameters",
    # Chain Registry
    "ChainRegistry",
    "DEFAULT_CONTRACT_TABLES",
    "L1_CHAINS",
    "L2_CHAINS",
    # Names
    "labelhash",
    "namehash",
    "namehash_hex",
    "validate_label",
    "split_subname",
    # Records
    "records_to_call_data",
    # Mint Policy
    "MintDecisionEngine",
    "MintRoute",
    "MINT_DECISION_TABLE",
    "MINT_ENDPOINTS",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # Gateways
    "NamespaceApiClient",
    "ChainGateway",
    "auth_typed_data",
    # Orchestrator
    "NamespaceClient",
    "generate_nonce",
]
