"""
Configuration dataclasses for the Namespace SDK.

This module defines the per-chain contract address structures, the client
configuration, logging configuration and environment-based loading.
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv

from .enums import L2ControllerVersion, Mode

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

BACKEND_API: Mapping[Mode, str] = MappingProxyType({
    Mode.PRODUCTION: "https://api.namespace.ninja",
    Mode.STAGING: "https://api-test.namespace.ninja",
})

DEFAULT_MINT_SOURCE = "namespace-sdk"


@dataclass(frozen=True)
class L1Contracts:
    """Namespace controllers deployed on an L1 chain."""

    mint_controller: str
    list_controller: str


@dataclass(frozen=True)
class L2Contracts:
    """Current Namespace contracts deployed on an L2 chain."""

    controller: str
    resolver: str
    registry_resolver: str
    emitter: str
    controller_v2: str


@dataclass(frozen=True)
class L2ContractsLegacy:
    """First-generation Namespace contracts on an L2 chain."""

    controller: str
    factory: str
    manager: str
    resolver: str


@dataclass(frozen=True)
class EnsContracts:
    """ENS registry and name wrapper on an L1 chain."""

    registry: str
    wrapper: str


@dataclass(frozen=True)
class ContractTables:
    """
    Immutable address tables keyed by chain name.

    Built once and shared by reference; the mappings are read-only views.
    """

    l1: Mapping[str, L1Contracts]
    l2: Mapping[str, L2Contracts]
    l2_legacy: Mapping[str, L2ContractsLegacy]
    ens: Mapping[str, EnsContracts]
    offchain_resolvers: Mapping[str, str]

    def __post_init__(self) -> None:
        for name in ("l1", "l2", "l2_legacy", "ens", "offchain_resolvers"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))


@dataclass
class LoggingConfig:
    """Logging configuration."""

    enabled: bool = False
    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class ClientConfig:
    """Configuration of a NamespaceClient."""

    chain_id: int
    mode: Mode = Mode.PRODUCTION
    backend_url: Optional[str] = None  # overrides the mode's base URL
    rpc_url: Optional[str] = None  # overrides the chain's public RPC
    mint_source: str = DEFAULT_MINT_SOURCE
    l2_controller_version: L2ControllerVersion = L2ControllerVersion.V1
    http_timeout: float = 10.0
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def backend_api_url(self) -> str:
        return (self.backend_url or BACKEND_API[self.mode]).rstrip("/")


def _bool_env(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config_from_env(
    env: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[str] = None,
) -> ClientConfig:
    """
    Build a ClientConfig from NAMESPACE_* environment variables.

    Args:
        env: Mapping to read instead of os.environ (no .env loading then)
        dotenv_path: Optional explicit .env file to load first

    Returns:
        ClientConfig

    Raises:
        ValueError: If NAMESPACE_CHAIN_ID is missing or not an integer
    """
    if env is None:
        load_dotenv(dotenv_path=dotenv_path)
        env = os.environ

    raw_chain_id = env.get("NAMESPACE_CHAIN_ID", "1")
    try:
        chain_id = int(raw_chain_id)
    except ValueError:
        raise ValueError(f"NAMESPACE_CHAIN_ID must be an integer, got {raw_chain_id!r}")

    return ClientConfig(
        chain_id=chain_id,
        mode=Mode((env.get("NAMESPACE_MODE") or Mode.PRODUCTION.value).lower()),
        backend_url=env.get("NAMESPACE_BACKEND_URL") or None,
        rpc_url=env.get("NAMESPACE_RPC_URL") or None,
        mint_source=env.get("NAMESPACE_MINT_SOURCE") or DEFAULT_MINT_SOURCE,
        l2_controller_version=L2ControllerVersion(
            (env.get("NAMESPACE_L2_CONTROLLER") or L2ControllerVersion.V1.value).lower()
        ),
        http_timeout=float(env.get("NAMESPACE_HTTP_TIMEOUT") or 10.0),
        logging=LoggingConfig(
            enabled=_bool_env(env.get("NAMESPACE_LOG"), False),
            level=(env.get("NAMESPACE_LOG_LEVEL") or "info").lower(),
            output_format=(env.get("NAMESPACE_LOG_FORMAT") or "text").lower(),
        ),
    )
