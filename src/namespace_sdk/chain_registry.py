"""
Chain Registry - supported chains and the Namespace contracts deployed on them.

This module contains:
- Chain name to chain id mapping for the supported L1 and L2 chains
- Default public RPC endpoints
- Contract address tables (L1 controllers, current and legacy L2 contracts,
  ENS registry/wrapper, offchain resolvers)

Contracts that are intentionally not deployed on a chain are listed with the
zero address.
"""

from types import MappingProxyType
from typing import Mapping

from .config import (
    ZERO_ADDRESS,
    ContractTables,
    EnsContracts,
    L1Contracts,
    L2Contracts,
    L2ContractsLegacy,
)
from .enums import ContractRole
from .exceptions import UnsupportedChainError

# ============================================================================
# CHAINS
# ============================================================================
L1_CHAINS: Mapping[str, int] = MappingProxyType({
    "mainnet": 1,
    "sepolia": 11155111,
})

L2_CHAINS: Mapping[str, int] = MappingProxyType({
    "base": 8453,
    "baseSepolia": 84532,
    "optimism": 10,
    "arbitrum": 42161,
})

# L1 chain each L2 settles on; L2 listings are registered on that L1
L1_FOR_L2: Mapping[str, str] = MappingProxyType({
    "base": "mainnet",
    "baseSepolia": "sepolia",
    "optimism": "mainnet",
    "arbitrum": "mainnet",
})

DEFAULT_RPC_URLS: Mapping[str, str] = MappingProxyType({
    "mainnet": "https://eth.llamarpc.com",
    "sepolia": "https://ethereum-sepolia-rpc.publicnode.com",
    "base": "https://mainnet.base.org",
    "baseSepolia": "https://sepolia.base.org",
    "optimism": "https://mainnet.optimism.io",
    "arbitrum": "https://arb1.arbitrum.io/rpc",
})


# ============================================================================
# L1 CONTRACTS
# ============================================================================
L1_CONTRACTS = {
    "mainnet": L1Contracts(
        list_controller="0xD75707Df440Aae28BbF243855Fcb4D62c366EfD6",
        mint_controller="0x18cC184E630A8290e46082351ba66A209a0787ba",
    ),
    "sepolia": L1Contracts(
        list_controller="0x0a46b7Da09A30f1bAB117dD97f73c3e83aa2C2db",
        mint_controller="0x2674E4FAe872780F01B99e109E67749B765703fB",
    ),
}

ENS_CONTRACTS = {
    "mainnet": EnsContracts(
        wrapper="0xd4416b13d2b3a9abae7acd5d6c2bbdbe25686401",
        registry="0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e",
    ),
    "sepolia": EnsContracts(
        wrapper="0x0635513f179D50A207757E05759CbD106d7dFcE8",
        registry="0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e",
    ),
}


# ============================================================================
# L2 CONTRACTS (only Base is live; the rest are placeholders)
# ============================================================================
_UNDEPLOYED_L2 = L2Contracts(
    controller=ZERO_ADDRESS,
    resolver=ZERO_ADDRESS,
    registry_resolver=ZERO_ADDRESS,
    emitter=ZERO_ADDRESS,
    controller_v2=ZERO_ADDRESS,
)

L2_CONTRACTS = {
    "base": L2Contracts(
        controller="0x62e5271bC935e25f6E6E48D3C8b8B88B2d483985",
        emitter="0xA9EA3fbBDB2d1696dC67C5FA45D9A64Ac432888C",
        registry_resolver="0x0D8e2772B4D8d58C8a66EEc5bf77c07934b84942",
        resolver="0x32d63B83BBA5a25f1f8aE308d7fd1F3c0b1abfA6",
        controller_v2="0x7d381362befC001ABeE479DE9CCbBCEeF2755828",
    ),
    "baseSepolia": L2Contracts(
        controller="0x316427abA8fBb45B086F5C1Fcc243F09353C97D9",
        resolver="0x0a31201dc15E25062E4Be297a86F5AD8DccC8055",
        emitter="0x8764EFC3d0b1172a3B76143b0A0E6757525Afc1f",
        registry_resolver="0x8810B0A0946E1585Cb4ca0bB07fDC074d7038941",
        controller_v2="0x8B2954842F18573499E40ab60FfBD6BC4F34429D",
    ),
    "optimism": _UNDEPLOYED_L2,
    "arbitrum": _UNDEPLOYED_L2,
}

_UNDEPLOYED_L2_LEGACY = L2ContractsLegacy(
    controller=ZERO_ADDRESS,
    factory=ZERO_ADDRESS,
    manager=ZERO_ADDRESS,
    resolver=ZERO_ADDRESS,
)

L2_CONTRACTS_LEGACY = {
    "base": L2ContractsLegacy(
        controller="0x38dB2bA2Fc5A6aD13BA931377F938BBDe831D397",
        factory="0x994E494506FE8166f2434E52560755D790eF5641",
        manager="0x903Ece28831a1c08D5e50D85626BFC72431930C4",
        resolver="0x0aBD0a6A1A98D7BD5D9909A3F1d7EE0B74587d70",
    ),
    "baseSepolia": _UNDEPLOYED_L2_LEGACY,
    "optimism": _UNDEPLOYED_L2_LEGACY,
    "arbitrum": _UNDEPLOYED_L2_LEGACY,
}

OFFCHAIN_RESOLVERS = {
    "base": "0xaE04a09CF2c408803AC7718e3dE22ac346a05B58",
    "baseSepolia": "0xdf244e628c49cd61a612ce2c84516722b2051fed",
    "optimism": ZERO_ADDRESS,
    "arbitrum": ZERO_ADDRESS,
}

DEFAULT_CONTRACT_TABLES = ContractTables(
    l1=L1_CONTRACTS,
    l2=L2_CONTRACTS,
    l2_legacy=L2_CONTRACTS_LEGACY,
    ens=ENS_CONTRACTS,
    offchain_resolvers=OFFCHAIN_RESOLVERS,
)

# role -> (table attribute, field on the table entry; None for plain addresses)
_ROLE_LOOKUP: Mapping[ContractRole, tuple] = MappingProxyType({
    ContractRole.MINT_CONTROLLER: ("l1", "mint_controller"),
    ContractRole.LIST_CONTROLLER: ("l1", "list_controller"),
    ContractRole.L2_CONTROLLER: ("l2", "controller"),
    ContractRole.L2_CONTROLLER_V2: ("l2", "controller_v2"),
    ContractRole.L2_RESOLVER: ("l2", "resolver"),
    ContractRole.L2_REGISTRY_RESOLVER: ("l2", "registry_resolver"),
    ContractRole.L2_EMITTER: ("l2", "emitter"),
    ContractRole.L2_LEGACY_CONTROLLER: ("l2_legacy", "controller"),
    ContractRole.L2_LEGACY_FACTORY: ("l2_legacy", "factory"),
    ContractRole.L2_LEGACY_MANAGER: ("l2_legacy", "manager"),
    ContractRole.L2_LEGACY_RESOLVER: ("l2_legacy", "resolver"),
    ContractRole.ENS_REGISTRY: ("ens", "registry"),
    ContractRole.ENS_WRAPPER: ("ens", "wrapper"),
    ContractRole.OFFCHAIN_RESOLVER: ("offchain_resolvers", None),
})


class ChainRegistry:
    """
    Static lookups for chains and deployed contracts.

    The registry holds no mutable state; the contract tables are injected
    and shared by reference.
    """

    def __init__(self, tables: ContractTables = DEFAULT_CONTRACT_TABLES) -> None:
        self._tables = tables
        self._chains: dict[str, int] = {**L1_CHAINS, **L2_CHAINS}
        self._names_by_id: dict[int, str] = {
            chain_id: name for name, chain_id in self._chains.items()
        }

    @property
    def tables(self) -> ContractTables:
        return self._tables

    def supported_chains(self) -> list[str]:
        return list(self._chains)

    def is_l1_chain(self, chain_name: str) -> bool:
        return chain_name in L1_CHAINS

    def is_l2_chain(self, chain_name: str) -> bool:
        return chain_name in L2_CHAINS

    def chain_id_for_name(self, chain_name: str) -> int:
        """
        Get the numeric chain id for a chain name.

        Raises:
            UnsupportedChainError: If the chain is not supported
        """
        chain_id = self._chains.get(chain_name)
        if chain_id is None:
            raise UnsupportedChainError(
                code="unsupported_chain",
                message=f"Unsupported chain: {chain_name}",
                details={"chain": chain_name},
            )
        return chain_id

    def name_for_chain_id(self, chain_id: int) -> str:
        """
        Get the chain name for a numeric chain id.

        Raises:
            UnsupportedChainError: If the chain id is not supported
        """
        name = self._names_by_id.get(chain_id)
        if name is None:
            raise UnsupportedChainError(
                code="unsupported_chain",
                message=f"Unsupported chain: {chain_id}",
                details={"chain_id": chain_id},
            )
        return name

    def l1_chain_for(self, chain_name: str) -> str:
        """L1 chain name for chain_name: itself for an L1, the settlement chain for an L2."""
        self.chain_id_for_name(chain_name)
        return L1_FOR_L2.get(chain_name, chain_name)

    def default_rpc_url(self, chain_name: str) -> str:
        self.chain_id_for_name(chain_name)
        return DEFAULT_RPC_URLS[chain_name]

    def contracts_for(self, chain_name: str, role: ContractRole) -> str:
        """
        Get the address of the contract serving a role on a chain.

        Returns the zero address where the contract is not deployed.

        Raises:
            UnsupportedChainError: If the chain has no entry in the role's table
        """
        table_name, attribute = _ROLE_LOOKUP[role]
        entry = getattr(self._tables, table_name).get(chain_name)
        if entry is None:
            raise UnsupportedChainError(
                code="unsupported_chain",
                message=f"No {role.value} table entry for chain: {chain_name}",
                details={"chain": chain_name, "role": role.value},
            )
        if attribute is None:
            return entry
        return getattr(entry, attribute)

    def require_contract(self, chain_name: str, role: ContractRole) -> str:
        """
        Like contracts_for, but fails fast when the contract is not deployed.

        Raises:
            UnsupportedChainError: If the chain is unknown or the address is zero
        """
        address = self.contracts_for(chain_name, role)
        if address.lower() == ZERO_ADDRESS:
            raise UnsupportedChainError(
                code="contract_not_deployed",
                message=f"{role.value} is not deployed on chain: {chain_name}",
                details={"chain": chain_name, "role": role.value},
            )
        return address
