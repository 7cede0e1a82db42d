"""
Exception classes for the Namespace SDK.

All SDK errors inherit from NamespaceError and carry a machine-readable code,
a human-readable message and optional details. Transport errors raised by
httpx or web3 are not wrapped; they reach the caller unchanged.
"""

from typing import Optional


class NamespaceError(Exception):
    """Base exception for all Namespace SDK errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ChainMismatchError(NamespaceError):
    """Raised when a listing requires a different chain than the one configured."""

    def __init__(self, listing_name: str, required_chain_id: int, current_chain_id: int) -> None:
        super().__init__(
            code="chain_mismatch",
            message=(
                f"Invalid chainId for listing {listing_name}. "
                f"Required: {required_chain_id}, Current: {current_chain_id}"
            ),
            details={
                "listing": listing_name,
                "required_chain_id": required_chain_id,
                "current_chain_id": current_chain_id,
            },
        )
        self.required_chain_id = required_chain_id
        self.current_chain_id = current_chain_id


class MintDeniedError(NamespaceError):
    """Raised when the backend reports that the subname cannot be minted."""

    def __init__(self, reason: str, validation_errors: Optional[list[str]] = None) -> None:
        super().__init__(
            code="mint_denied",
            message=f"Could not generate mint parameters, reason: {reason}",
            details={"reason": reason, "validation_errors": list(validation_errors or [])},
        )
        self.reason = reason


class VerificationRequiredError(NamespaceError):
    """Raised when a verified-minter mint is attempted without an auth token."""

    def __init__(self, label: str) -> None:
        super().__init__(
            code="verification_required",
            message="Minting subname requires token verification.",
            details={"label": label},
        )


class UnsupportedChainError(NamespaceError):
    """Raised for unknown chains and for contracts not deployed on a chain."""

    pass


class WalletNotConnectedError(NamespaceError):
    """Raised when a write or signing operation has no account to sign with."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code="wallet_not_connected",
            message=f"Wallet account not connected, cannot perform {operation}.",
            details={"operation": operation},
        )


class InvalidSubnameError(NamespaceError):
    """Raised when a subname label or dotted name is malformed."""

    pass


class NotFoundError(NamespaceError):
    """Raised when the backend has no listing for the requested name."""

    pass
