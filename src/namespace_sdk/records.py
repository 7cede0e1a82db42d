"""
Conversion of resolver records into resolver data.

Resolver data is the ordered list of ABI-encoded resolver calls applied to
the new subname during the mint. The order is texts, then addresses, then
contenthash; the resolver applies the calls sequentially.
"""

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_bytes

from .abi import (
    SET_ADDR_SIGNATURE,
    SET_ADDRESS_SIGNATURE,
    SET_CONTENTHASH_SIGNATURE,
    SET_TEXT_SIGNATURE,
)
from .models import SetRecordsRequest
from .names import namehash

# SLIP-44 coin type of ether; stored through setAddr instead of setAddress
ETH_COIN_TYPE = 60


def encode_call(signature: str, types: list[str], args: list) -> bytes:
    """4-byte selector of the signature followed by the ABI-encoded arguments."""
    return function_signature_to_4byte_selector(signature) + encode(types, args)


def _hex_to_bytes(value: str) -> bytes:
    return to_bytes(hexstr=value)


def records_to_call_data(records: SetRecordsRequest) -> list[bytes]:
    """
    Encode the records of a subname as resolver calls.

    Args:
        records: Records keyed by the fully-qualified subname

    Returns:
        Encoded calls: setText per text record, setAddr (coin type 60) or
        setAddress per address record, then setContenthash if present
    """
    node = namehash(records.full_subname)
    data: list[bytes] = []

    for text in records.texts:
        data.append(encode_call(
            SET_TEXT_SIGNATURE,
            ["bytes32", "string", "string"],
            [node, text.key, text.value],
        ))

    for record in records.addresses:
        if record.coin_type == ETH_COIN_TYPE:
            data.append(encode_call(
                SET_ADDR_SIGNATURE,
                ["bytes32", "address"],
                [node, record.address],
            ))
        else:
            data.append(encode_call(
                SET_ADDRESS_SIGNATURE,
                ["bytes32", "uint256", "bytes"],
                [node, record.coin_type, _hex_to_bytes(record.address)],
            ))

    if records.contenthash:
        data.append(encode_call(
            SET_CONTENTHASH_SIGNATURE,
            ["bytes32", "bytes"],
            [node, _hex_to_bytes(records.contenthash)],
        ))

    return data
