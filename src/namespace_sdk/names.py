"""
Name hashing, label validation and dotted-name splitting.

Provides ENS namehash/labelhash, validation of subname labels before any
network call, and the two name-splitting rules used by the L2 availability
checks.
"""

import re
from typing import Optional

import idna
from eth_utils import keccak

from .exceptions import InvalidSubnameError

# Control characters, whitespace and the label separator are never part of a label
FORBIDDEN_LABEL_CHARS = re.compile(r"[\x00-\x1f\x7f\s.]")

EMPTY_NODE = b"\x00" * 32


def labelhash(label: str) -> bytes:
    """keccak256 of a single UTF-8 label."""
    return keccak(text=label)


def namehash(name: str) -> bytes:
    """
    ENS namehash of a dotted name.

    namehash("") = 0x00..00
    namehash("a.eth") = keccak256(namehash("eth") + keccak256("a"))
    """
    node = EMPTY_NODE
    if not name:
        return node
    for label in reversed(name.split(".")):
        node = keccak(node + labelhash(label))
    return node


def namehash_hex(name: str) -> str:
    return "0x" + namehash(name).hex()


def validate_label(label: str) -> str:
    """
    Validate a subname label.

    Args:
        label: The label to mint (e.g. 'alice' for 'alice.example.eth')

    Returns:
        The UTS-46 normalized label ('Alice' becomes 'alice'); this is the
        form that is namehashed and sent to the backend

    Raises:
        InvalidSubnameError: If the label is empty, contains a dot, whitespace
            or control characters (before or after normalization), or contains
            code points IDNA/UTS-46 disallows
    """
    if not label:
        raise InvalidSubnameError(
            code="empty_label",
            message="Subname label is empty",
            details={"label": label},
        )

    _check_forbidden_chars(label)

    try:
        normalized = idna.uts46_remap(label, std3_rules=False, transitional=False)
    except idna.IDNAError as e:
        raise InvalidSubnameError(
            code="idna_error",
            message=f"Subname label is not a valid name label: {e}",
            details={"label": label},
        )

    if not normalized:
        raise InvalidSubnameError(
            code="empty_label",
            message="Subname label is empty after normalization",
            details={"label": label},
        )
    # Fullwidth and ideographic full stops map to '.'
    _check_forbidden_chars(normalized, original=label)
    return normalized


def _check_forbidden_chars(label: str, original: Optional[str] = None) -> None:
    forbidden = FORBIDDEN_LABEL_CHARS.findall(label)
    if forbidden:
        raise InvalidSubnameError(
            code="forbidden_chars",
            message="Subname label contains forbidden characters",
            details={"label": original or label, "forbidden_chars": forbidden},
        )


def split_subname(full_name: str, strict: bool = False) -> tuple[str, str]:
    """
    Split 'label.parent.tld' into (label, parent name).

    strict=True accepts exactly three labels, the rule of the legacy L2
    controllers. Otherwise at least three labels are required and the parent
    is everything after the first label, so 'a.b.example.eth' splits into
    ('a', 'b.example.eth'), whose namehash is the node 'a' is minted under.
    The parent is not cut down to the last two labels: ('a', 'example.eth')
    would check 'a.example.eth', a different node.

    Raises:
        InvalidSubnameError: If the name does not have the required labels
    """
    labels = full_name.split(".")
    if any(not part for part in labels):
        raise InvalidSubnameError(
            code="empty_label",
            message=f"Name contains an empty label: {full_name}",
            details={"name": full_name},
        )

    if strict and len(labels) != 3:
        raise InvalidSubnameError(
            code="invalid_label_count",
            message=f"Expected a name of the form label.parent.tld, got: {full_name}",
            details={"name": full_name, "labels": len(labels)},
        )
    if len(labels) < 3:
        raise InvalidSubnameError(
            code="invalid_label_count",
            message=f"Expected at least three labels, got: {full_name}",
            details={"name": full_name, "labels": len(labels)},
        )

    return labels[0], ".".join(labels[1:])
