"""
Data models for the Namespace SDK.

This module defines the value objects exchanged with the backend service and
the chain gateway. Backend JSON uses camelCase keys; the models expose
snake_case attributes and convert with from_dict/to_dict.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .enums import ListingType, MintDeniedReason, TokenKind


def _drop_none(data: dict) -> dict:
    return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class Listing:
    """A parent name listed for subname sales."""

    label: str
    full_name: str
    node: str  # namehash of full_name
    network: str  # L1 chain name
    listing_type: ListingType = ListingType.L1
    token_network: Optional[str] = None  # L2 chain name, L2 listings only
    registry_network: Optional[str] = None

    @property
    def is_l2(self) -> bool:
        return self.listing_type == ListingType.L2

    @property
    def l2_network(self) -> Optional[str]:
        """L2 chain the listing's subnames live on."""
        return self.token_network or self.registry_network

    @classmethod
    def from_dict(cls, data: dict) -> "Listing":
        # Every listing type other than "l2" mints on L1
        if data.get("listingType") == ListingType.L2.value:
            listing_type = ListingType.L2
        else:
            listing_type = ListingType.L1
        return cls(
            label=data["label"],
            full_name=data["fullName"],
            node=data.get("node", ""),
            network=data["network"],
            listing_type=listing_type,
            token_network=data.get("tokenNetwork"),
            registry_network=data.get("registryNetwork"),
        )

    def to_dict(self) -> dict:
        return _drop_none({
            "label": self.label,
            "fullName": self.full_name,
            "node": self.node,
            "network": self.network,
            "listingType": self.listing_type.value,
            "tokenNetwork": self.token_network,
            "registryNetwork": self.registry_network,
        })


@dataclass(frozen=True)
class TextRecord:
    """A resolver text record."""

    key: str
    value: str


@dataclass(frozen=True)
class AddressRecord:
    """A resolver address record for a SLIP-44 coin type."""

    address: str
    coin_type: int


@dataclass
class MintRecords:
    """Optional resolver records attached to a mint."""

    addresses: list[AddressRecord] = field(default_factory=list)
    texts: list[TextRecord] = field(default_factory=list)
    contenthash: Optional[str] = None


@dataclass(frozen=True)
class AuthToken:
    """Bearer credential issued by the backend."""

    value: str
    kind: TokenKind = TokenKind.CURRENT

    @classmethod
    def coerce(cls, token: Union[str, "AuthToken", None]) -> Optional["AuthToken"]:
        """Wrap a bare string as a current-kind token; pass tokens through."""
        if token is None or token == "":
            return None
        if isinstance(token, AuthToken):
            return token
        return cls(value=token)


@dataclass
class MintRequest:
    """A single mint attempt built by the caller."""

    subname_label: str
    minter_address: str
    subname_owner: Optional[str] = None
    expiry_in_years: Optional[int] = None
    token: Union[str, AuthToken, None] = None
    records: Optional[MintRecords] = None

    @property
    def owner(self) -> str:
        """Explicit owner wins over the minter."""
        return self.subname_owner or self.minter_address


@dataclass
class SimulateMintRequest:
    """Eligibility simulation request."""

    label: str
    parent_label: str
    network: str
    minter: str
    subname_owner: str

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "parentLabel": self.parent_label,
            "network": self.network,
            "minter": self.minter,
            "subnameOwner": self.subname_owner,
        }


@dataclass
class SimulateMintResponse:
    """Backend verdict on a mint attempt."""

    can_mint: bool
    estimated_price: Any
    estimated_fee: Any
    validation_errors: list[str] = field(default_factory=list)
    requires_verified_minter: bool = False
    is_standard_fee: bool = True

    @property
    def denied_reason(self) -> str:
        """First validation error, or UNKNOWN_REASON when none was given."""
        if self.validation_errors:
            return self.validation_errors[0]
        return MintDeniedReason.UNKNOWN_REASON.value

    @classmethod
    def from_dict(cls, data: dict) -> "SimulateMintResponse":
        return cls(
            can_mint=bool(data.get("canMint", False)),
            estimated_price=data.get("estimatedPrice", 0),
            estimated_fee=data.get("estimatedFee", 0),
            validation_errors=[str(code) for code in data.get("validationErrors") or []],
            requires_verified_minter=bool(data.get("requiresVerifiedMinter", False)),
            is_standard_fee=bool(data.get("isStandardFee", True)),
        )


@dataclass
class L1MintParamsRequest:
    """Request for backend-signed L1 mint parameters."""

    label: str
    parent_label: str
    subname_owner: str
    network: str
    resolver: Optional[str] = None
    registration_period: Optional[int] = None

    def to_dict(self) -> dict:
        return _drop_none({
            "label": self.label,
            "parentLabel": self.parent_label,
            "subnameOwner": self.subname_owner,
            "network": self.network,
            "resolver": self.resolver,
            "registrationPeriod": self.registration_period,
        })


@dataclass(frozen=True)
class L1MintParameters:
    """Signed L1 mint context; passed verbatim to the mint controller."""

    subname_label: str
    parent_node: str
    resolver: str
    subname_owner: str
    fuses: int
    mint_price: str
    mint_fee: str
    expiry: int
    ttl: int

    @property
    def total_price(self) -> int:
        return int(self.mint_fee) + int(self.mint_price)

    @classmethod
    def from_dict(cls, data: dict) -> "L1MintParameters":
        return cls(
            subname_label=data["subnameLabel"],
            parent_node=data["parentNode"],
            resolver=data["resolver"],
            subname_owner=data["subnameOwner"],
            fuses=int(data.get("fuses", 0)),
            mint_price=str(data["mintPrice"]),
            mint_fee=str(data["mintFee"]),
            expiry=int(data["expiry"]),
            ttl=int(data.get("ttl", 0)),
        )


@dataclass(frozen=True)
class L1MintParamsResponse:
    parameters: L1MintParameters
    signature: str

    @classmethod
    def from_dict(cls, data: dict) -> "L1MintParamsResponse":
        return cls(
            parameters=L1MintParameters.from_dict(data["parameters"]),
            signature=data["signature"],
        )


@dataclass
class L2MintParamsRequest:
    """Request for backend-signed L2 mint parameters."""

    label: str
    parent_label: str
    owner: str
    main_network: str
    registry_network: str
    parent_node: Optional[str] = None
    expiry_in_years: Optional[int] = None
    use_v2: Optional[bool] = None
    minter_address: Optional[str] = None

    def to_dict(self) -> dict:
        return _drop_none({
            "label": self.label,
            "parentLabel": self.parent_label,
            "owner": self.owner,
            "mainNetwork": self.main_network,
            "registryNetwork": self.registry_network,
            # older backend revisions read the L2 chain from tokenNetwork
            "tokenNetwork": self.registry_network,
            "parentNode": self.parent_node,
            "expiryInYears": self.expiry_in_years,
            "useV2": self.use_v2,
            "minterAddress": self.minter_address,
        })


@dataclass(frozen=True)
class L2MintParameters:
    """Signed L2 mint context; passed verbatim to the L2 controller."""

    label: str
    parent_node: str
    owner: str
    expiry: int
    price: str
    fee: str
    payment_receiver: str
    nonce: str
    verified_minter: Optional[str] = None
    signature_expiry: Optional[str] = None

    @property
    def total_price(self) -> int:
        return int(self.fee) + int(self.price)

    @classmethod
    def from_dict(cls, data: dict) -> "L2MintParameters":
        signature_expiry = data.get("signatureExpiry")
        return cls(
            label=data["label"],
            parent_node=data["parentNode"],
            owner=data["owner"],
            expiry=int(data["expiry"]),
            price=str(data["price"]),
            fee=str(data["fee"]),
            payment_receiver=data["paymentReceiver"],
            nonce=str(data["nonce"]),
            verified_minter=data.get("verifiedMinter"),
            signature_expiry=str(signature_expiry) if signature_expiry is not None else None,
        )


@dataclass(frozen=True)
class L2MintParamsResponse:
    parameters: L2MintParameters
    signature: str

    @classmethod
    def from_dict(cls, data: dict) -> "L2MintParamsResponse":
        return cls(
            parameters=L2MintParameters.from_dict(data["parameters"]),
            signature=data["signature"],
        )


@dataclass
class SetRecordsRequest:
    """Records to set on a fully-qualified subname during the mint."""

    full_subname: str
    addresses: list[AddressRecord] = field(default_factory=list)
    texts: list[TextRecord] = field(default_factory=list)
    contenthash: Optional[str] = None

    @classmethod
    def from_mint_records(cls, full_subname: str, records: MintRecords) -> "SetRecordsRequest":
        return cls(
            full_subname=full_subname,
            addresses=list(records.addresses or []),
            texts=list(records.texts or []),
            contenthash=records.contenthash,
        )


@dataclass(frozen=True)
class AuthTokenMessage:
    """Sign-in message signed with EIP-712 and exchanged for session tokens."""

    app: str
    issued: int  # epoch millis
    message: str
    nonce: str
    principal: str

    def to_dict(self) -> dict:
        return {
            "app": self.app,
            "issued": self.issued,
            "message": self.message,
            "nonce": self.nonce,
            "principal": self.principal,
        }


@dataclass(frozen=True)
class AuthTokenRequest:
    message: AuthTokenMessage
    signature: str

    def to_dict(self) -> dict:
        return {"message": self.message.to_dict(), "signature": self.signature}


@dataclass(frozen=True)
class AuthTokenResponse:
    access_token: str
    refresh_token: str

    @classmethod
    def from_dict(cls, data: dict) -> "AuthTokenResponse":
        return cls(
            access_token=data["accessToken"],
            refresh_token=data["refreshToken"],
        )


@dataclass
class MintTransactionParameters:
    """Simulated contract call, ready for external submission."""

    abi: list[dict]
    contract_address: str
    function_name: str
    args: tuple
    value: int
    chain_id: int
    data: str  # ABI-encoded calldata, 0x-prefixed

    def to_transaction(self, sender: str) -> dict:
        """Transaction dict accepted by web3 / eth_account signing."""
        return {
            "from": sender,
            "to": self.contract_address,
            "value": self.value,
            "data": self.data,
            "chainId": self.chain_id,
        }
