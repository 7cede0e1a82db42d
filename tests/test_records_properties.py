"""
Property-based tests for resolver record encoding.

Uses Hypothesis to verify that records become resolver calls in the order
texts, addresses, contenthash, each keyed by the subname's namehash.
"""

from eth_abi import decode
from eth_utils import function_signature_to_4byte_selector, to_bytes
from hypothesis import given, settings
from hypothesis import strategies as st

from namespace_sdk.abi import (
    SET_ADDR_SIGNATURE,
    SET_ADDRESS_SIGNATURE,
    SET_CONTENTHASH_SIGNATURE,
    SET_TEXT_SIGNATURE,
)
from namespace_sdk.models import AddressRecord, SetRecordsRequest, TextRecord
from namespace_sdk.names import namehash
from namespace_sdk.records import ETH_COIN_TYPE, records_to_call_data


SET_TEXT = function_signature_to_4byte_selector(SET_TEXT_SIGNATURE)
SET_ADDR = function_signature_to_4byte_selector(SET_ADDR_SIGNATURE)
SET_ADDRESS = function_signature_to_4byte_selector(SET_ADDRESS_SIGNATURE)
SET_CONTENTHASH = function_signature_to_4byte_selector(SET_CONTENTHASH_SIGNATURE)


# Strategies

hex_bytes_strategy = st.binary(min_size=1, max_size=40).map(lambda b: "0x" + b.hex())

eth_address_strategy = st.binary(min_size=20, max_size=20).map(lambda b: "0x" + b.hex())


@st.composite
def text_record_strategy(draw) -> TextRecord:
    key = draw(st.sampled_from(["avatar", "url", "com.twitter", "description", "email"]))
    value = draw(st.text(max_size=40))
    return TextRecord(key=key, value=value)


@st.composite
def address_record_strategy(draw) -> AddressRecord:
    if draw(st.booleans()):
        return AddressRecord(address=draw(eth_address_strategy), coin_type=ETH_COIN_TYPE)
    coin_type = draw(st.integers(min_value=0, max_value=2**32).filter(lambda c: c != ETH_COIN_TYPE))
    return AddressRecord(address=draw(hex_bytes_strategy), coin_type=coin_type)


@st.composite
def records_strategy(draw) -> SetRecordsRequest:
    return SetRecordsRequest(
        full_subname=draw(st.sampled_from(["alice.example.eth", "bob.names.eth", "a.b.c.eth"])),
        texts=draw(st.lists(text_record_strategy(), max_size=4)),
        addresses=draw(st.lists(address_record_strategy(), max_size=4)),
        contenthash=draw(st.one_of(st.none(), st.just(""), hex_bytes_strategy)),
    )


class TestResolverDataOrderProperty:
    """Resolver calls come out texts first, then addresses, then contenthash."""

    @given(records=records_strategy())
    @settings(max_examples=100)
    def test_call_count_and_order(self, records: SetRecordsRequest) -> None:
        data = records_to_call_data(records)

        expected = [SET_TEXT] * len(records.texts)
        for record in records.addresses:
            expected.append(SET_ADDR if record.coin_type == ETH_COIN_TYPE else SET_ADDRESS)
        if records.contenthash:
            expected.append(SET_CONTENTHASH)

        assert [call[:4] for call in data] == expected

    @given(records=records_strategy())
    @settings(max_examples=100)
    def test_every_call_targets_the_subname_node(self, records: SetRecordsRequest) -> None:
        node = namehash(records.full_subname)

        for call in records_to_call_data(records):
            assert call[4:36] == node

    def test_no_records_no_calls(self) -> None:
        assert records_to_call_data(SetRecordsRequest(full_subname="alice.example.eth")) == []


class TestResolverDataEncodingProperty:
    """Each resolver call decodes back to the record it came from."""

    @given(text=text_record_strategy())
    @settings(max_examples=100)
    def test_text_record_arguments(self, text: TextRecord) -> None:
        records = SetRecordsRequest(full_subname="alice.example.eth", texts=[text])

        (call,) = records_to_call_data(records)
        node, key, value = decode(["bytes32", "string", "string"], call[4:])

        assert node == namehash("alice.example.eth")
        assert (key, value) == (text.key, text.value)

    @given(address=eth_address_strategy)
    @settings(max_examples=100)
    def test_eth_address_uses_set_addr(self, address: str) -> None:
        records = SetRecordsRequest(
            full_subname="alice.example.eth",
            addresses=[AddressRecord(address=address, coin_type=ETH_COIN_TYPE)],
        )

        (call,) = records_to_call_data(records)
        _, decoded = decode(["bytes32", "address"], call[4:])

        assert call[:4] == SET_ADDR
        assert decoded.lower() == address.lower()

    @given(
        address=hex_bytes_strategy,
        coin_type=st.integers(min_value=0, max_value=2**32).filter(lambda c: c != ETH_COIN_TYPE),
    )
    @settings(max_examples=100)
    def test_other_coin_types_use_set_address(self, address: str, coin_type: int) -> None:
        records = SetRecordsRequest(
            full_subname="alice.example.eth",
            addresses=[AddressRecord(address=address, coin_type=coin_type)],
        )

        (call,) = records_to_call_data(records)
        _, decoded_coin_type, decoded_address = decode(["bytes32", "uint256", "bytes"], call[4:])

        assert call[:4] == SET_ADDRESS
        assert decoded_coin_type == coin_type
        assert decoded_address == to_bytes(hexstr=address)

    @given(contenthash=hex_bytes_strategy)
    @settings(max_examples=100)
    def test_contenthash_bytes(self, contenthash: str) -> None:
        records = SetRecordsRequest(full_subname="alice.example.eth", contenthash=contenthash)

        (call,) = records_to_call_data(records)
        _, decoded = decode(["bytes32", "bytes"], call[4:])

        assert call[:4] == SET_CONTENTHASH
        assert decoded == to_bytes(hexstr=contenthash)
