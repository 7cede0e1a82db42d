"""
Property-based tests for the mint orchestrator.

NamespaceClient is wired to a real NamespaceApiClient on an
httpx.MockTransport and a real ChainGateway on a mocked AsyncWeb3.
"""

import asyncio
import json
from io import StringIO
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data
from hypothesis import given, settings
from hypothesis import strategies as st

from namespace_sdk.audit_logger import AuditLogger
from namespace_sdk.backend_client import NamespaceApiClient
from namespace_sdk.chain_client import ChainGateway, auth_typed_data
from namespace_sdk.config import ZERO_ADDRESS, ClientConfig, LoggingConfig
from namespace_sdk.enums import ListingType, LogLevel
from namespace_sdk.exceptions import (
    ChainMismatchError,
    InvalidSubnameError,
    MintDeniedError,
    UnsupportedChainError,
)
from namespace_sdk.models import (
    AuthTokenMessage,
    Listing,
    MintRecords,
    MintRequest,
    TextRecord,
)
from namespace_sdk.names import namehash, namehash_hex
from namespace_sdk.orchestrator import NamespaceClient, generate_nonce


ACCOUNT = Account.from_key("0x" + "22" * 32)
MINTER = "0x1111111111111111111111111111111111111111"
OWNER = "0x2222222222222222222222222222222222222222"

L1_LISTING = Listing(
    label="example",
    full_name="example.eth",
    node=namehash_hex("example.eth"),
    network="mainnet",
)

L2_LISTING = Listing(
    label="example",
    full_name="example.eth",
    node=namehash_hex("example.eth"),
    network="mainnet",
    listing_type=ListingType.L2,
    token_network="base",
)


def run_async(coro):
    """Helper to run async code in tests."""
    return asyncio.run(coro)


class Harness:
    """NamespaceClient with a recording backend and a mocked chain."""

    def __init__(self, chain_id: int = 1, simulation: dict = None, account=None, logger=None) -> None:
        self.simulation = simulation or {"canMint": True}
        self.requests: list[httpx.Request] = []

        self.w3 = MagicMock()
        contract = self.w3.eth.contract.return_value
        contract.encode_abi.return_value = "0xdeadbeef"
        contract.get_function_by_name.return_value.return_value.call = AsyncMock(return_value=None)
        contract.functions.owner.return_value.call = AsyncMock(return_value=ZERO_ADDRESS)
        contract.functions.isNodeAvailable.return_value.call = AsyncMock(return_value=False)

        self.config = ClientConfig(chain_id=chain_id, mint_source="test-app")
        backend = NamespaceApiClient(
            "https://api.test.invalid",
            transport=httpx.MockTransport(self.handler),
        )
        chain = ChainGateway(chain_id=chain_id, account=account, mint_source="test-app", w3=self.w3)
        self.client = NamespaceClient(self.config, backend=backend, chain=chain, logger=logger)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/api/v1/listings/single":
            return httpx.Response(200, json=L1_LISTING.to_dict())
        if path == "/api/v1/mint/simulate":
            return httpx.Response(200, json=self.simulation)
        if path == "/api/v1/mint":
            payload = json.loads(request.content)
            return httpx.Response(200, json={
                "parameters": {
                    "subnameLabel": payload["label"],
                    "parentNode": namehash_hex("example.eth"),
                    "resolver": "0x3333333333333333333333333333333333333333",
                    "subnameOwner": payload["subnameOwner"],
                    "fuses": 0,
                    "mintPrice": "1000",
                    "mintFee": "25",
                    "expiry": 1893456000,
                    "ttl": 0,
                },
                "signature": "0x" + "ab" * 65,
            })
        if path == "/api/v1/mint/l2":
            payload = json.loads(request.content)
            return httpx.Response(200, json={
                "parameters": {
                    "label": payload["label"],
                    "parentNode": payload["parentNode"],
                    "owner": payload["owner"],
                    "expiry": 1893456000,
                    "price": "2000",
                    "fee": "50",
                    "paymentReceiver": "0x4444444444444444444444444444444444444444",
                    "nonce": "0x" + "01" * 32,
                },
                "signature": "0x" + "cd" * 65,
            })
        if path == "/auth":
            return httpx.Response(200, json={"accessToken": "access", "refreshToken": "refresh"})
        return httpx.Response(500)

    def payload(self, index: int) -> dict:
        return json.loads(self.requests[index].content)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


label_strategy = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=15)


class TestChainValidationProperty:
    """The configured chain must match the listing before anything else happens."""

    @given(
        chain_id=st.sampled_from([11155111, 8453, 84532, 10, 42161]),
        label=label_strategy,
    )
    @settings(max_examples=30, deadline=None)
    def test_l1_listing_on_wrong_chain(self, chain_id: int, label: str) -> None:
        harness = Harness(chain_id=chain_id)

        with pytest.raises(ChainMismatchError) as exc_info:
            run_async(harness.client.get_mint_transaction_parameters(
                L1_LISTING, MintRequest(subname_label=label, minter_address=MINTER)
            ))

        assert exc_info.value.required_chain_id == 1
        assert exc_info.value.current_chain_id == chain_id
        assert harness.requests == []

    def test_l2_listing_requires_its_l2_chain(self) -> None:
        harness = Harness(chain_id=1)

        with pytest.raises(ChainMismatchError) as exc_info:
            run_async(harness.client.mint(L2_LISTING, MintRequest(subname_label="alice", minter_address=MINTER)))

        assert exc_info.value.required_chain_id == 8453
        assert harness.requests == []

    def test_availability_checks_chain(self) -> None:
        harness = Harness(chain_id=8453)

        with pytest.raises(ChainMismatchError):
            run_async(harness.client.is_subname_available(L1_LISTING, "alice"))
        harness.w3.eth.contract.assert_not_called()

    def test_invalid_label_rejected_before_network(self) -> None:
        harness = Harness(chain_id=1)

        with pytest.raises(InvalidSubnameError):
            run_async(harness.client.get_mint_transaction_parameters(
                L1_LISTING, MintRequest(subname_label="al ice", minter_address=MINTER)
            ))
        assert harness.requests == []

    def test_unsupported_configured_chain(self) -> None:
        with pytest.raises(UnsupportedChainError):
            NamespaceClient(ClientConfig(chain_id=999999))


class TestMintFlowProperty:
    """End-to-end mint parameter negotiation and transaction building."""

    @given(label=label_strategy, explicit_owner=st.booleans())
    @settings(max_examples=30, deadline=None)
    def test_l1_owner_defaults_to_minter(self, label: str, explicit_owner: bool) -> None:
        harness = Harness(chain_id=1)
        request = MintRequest(
            subname_label=label,
            minter_address=MINTER,
            subname_owner=OWNER if explicit_owner else None,
        )

        tx = run_async(harness.client.get_mint_transaction_parameters(L1_LISTING, request))

        assert harness.paths == ["/api/v1/mint/simulate", "/api/v1/mint"]
        expected_owner = OWNER if explicit_owner else MINTER
        assert harness.payload(0)["subnameOwner"] == expected_owner
        assert harness.payload(1)["subnameOwner"] == expected_owner
        assert harness.requests[0].url.params["minterAddress"] == MINTER
        assert tx.function_name == "mint"
        assert tx.value == 1025
        assert tx.chain_id == 1

    def test_records_keyed_by_full_subname(self) -> None:
        harness = Harness(chain_id=1)
        request = MintRequest(
            subname_label="alice",
            minter_address=MINTER,
            records=MintRecords(texts=[TextRecord(key="url", value="https://example.com")]),
        )

        tx = run_async(harness.client.get_mint_transaction_parameters(L1_LISTING, request))

        assert tx.function_name == "mintWithData"
        (resolver_call,) = tx.args[2]
        assert resolver_call[4:36] == namehash("alice.example.eth")

    def test_mixed_case_label_is_normalized_before_minting(self) -> None:
        harness = Harness(chain_id=1)
        request = MintRequest(
            subname_label="Alice",
            minter_address=MINTER,
            records=MintRecords(texts=[TextRecord(key="url", value="https://example.com")]),
        )

        tx = run_async(harness.client.get_mint_transaction_parameters(L1_LISTING, request))

        assert harness.payload(0)["label"] == "alice"
        assert harness.payload(1)["label"] == "alice"
        (resolver_call,) = tx.args[2]
        assert resolver_call[4:36] == namehash("alice.example.eth")

    def test_mixed_case_label_availability_uses_normalized_node(self) -> None:
        harness = Harness(chain_id=1)

        run_async(harness.client.is_subname_available(L1_LISTING, "ALICE"))

        harness.w3.eth.contract.return_value.functions.owner.assert_called_once_with(
            namehash("alice.example.eth")
        )

    def test_l2_flow(self) -> None:
        harness = Harness(chain_id=8453)
        request = MintRequest(subname_label="alice", minter_address=MINTER, expiry_in_years=2)

        tx = run_async(harness.client.get_mint_transaction_parameters(L2_LISTING, request))

        assert harness.paths == ["/api/v1/mint/simulate", "/api/v1/mint/l2"]
        payload = harness.payload(1)
        assert payload["registryNetwork"] == "base"
        assert payload["mainNetwork"] == "mainnet"
        assert payload["owner"] == MINTER
        assert payload["expiryInYears"] == 2
        assert payload["parentNode"] == namehash_hex("example.eth")
        assert "useV2" not in payload
        assert tx.value == 2050
        assert tx.args[2] == b"test-app"

    def test_denied_mint_never_reaches_chain(self) -> None:
        harness = Harness(chain_id=1, simulation={"canMint": False, "validationErrors": ["SUBNAME_TAKEN"]})

        with pytest.raises(MintDeniedError) as exc_info:
            run_async(harness.client.get_mint_transaction_parameters(
                L1_LISTING, MintRequest(subname_label="alice", minter_address=MINTER)
            ))

        assert exc_info.value.reason == "SUBNAME_TAKEN"
        harness.w3.eth.contract.assert_not_called()

    def test_failures_are_logged(self) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="json", output_stream=stream, level=LogLevel.DEBUG)
        harness = Harness(
            chain_id=1,
            simulation={"canMint": False, "validationErrors": ["LISTING_EXPIRED"]},
            logger=logger,
        )

        with pytest.raises(MintDeniedError):
            run_async(harness.client.get_mint_transaction_parameters(
                L1_LISTING, MintRequest(subname_label="alice", minter_address=MINTER)
            ))

        errors = [entry for entry in logger.entries if entry.level == LogLevel.ERROR]
        assert errors[-1].data["error_code"] == "mint_denied"
        assert errors[-1].data["subname"] == "alice.example.eth"


class TestReadOperationsProperty:
    """Listing lookup, mint details and availability."""

    @pytest.mark.parametrize("chain_id, network", [
        (1, "mainnet"),
        (11155111, "sepolia"),
        (8453, "mainnet"),
        (84532, "sepolia"),
        (10, "mainnet"),
        (42161, "mainnet"),
    ])
    def test_listing_looked_up_on_l1_of_configured_chain(self, chain_id: int, network: str) -> None:
        harness = Harness(chain_id=chain_id)

        listing = run_async(harness.client.get_listed_name("example.eth"))

        assert listing == L1_LISTING
        assert harness.requests[0].url.params["network"] == network

    @given(chain_id=st.sampled_from([8453, 84532, 10, 42161]))
    @settings(max_examples=10, deadline=None)
    def test_explicit_l2_chain_rejected(self, chain_id: int) -> None:
        harness = Harness(chain_id=1)

        with pytest.raises(UnsupportedChainError) as exc_info:
            run_async(harness.client.get_listed_name("example.eth", chain_id=chain_id))

        assert exc_info.value.code == "not_l1_chain"
        assert harness.requests == []

    def test_listing_with_explicit_chain(self) -> None:
        harness = Harness(chain_id=8453)

        run_async(harness.client.get_listed_name("example.eth", chain_id=11155111))

        assert harness.requests[0].url.params["network"] == "sepolia"

    @given(label=label_strategy)
    @settings(max_examples=30, deadline=None)
    def test_mint_details_owner_is_minter(self, label: str) -> None:
        harness = Harness(chain_id=1, simulation={"canMint": True, "estimatedPrice": 5, "estimatedFee": 1})

        details = run_async(harness.client.get_mint_details(L1_LISTING, label, MINTER))

        assert details.can_mint is True
        assert harness.payload(0)["minter"] == MINTER
        assert harness.payload(0)["subnameOwner"] == MINTER
        assert harness.payload(0)["label"] == label

    def test_l1_availability(self) -> None:
        harness = Harness(chain_id=1)

        assert run_async(harness.client.is_subname_available(L1_LISTING, "alice")) is True
        harness.w3.eth.contract.return_value.functions.owner.assert_called_once_with(
            namehash("alice.example.eth")
        )

    def test_l2_availability(self) -> None:
        harness = Harness(chain_id=8453)

        assert run_async(harness.client.is_subname_available(L2_LISTING, "alice")) is False
        harness.w3.eth.contract.return_value.functions.isNodeAvailable.assert_called_once_with(
            "alice", namehash("example.eth")
        )


class TestAuthTokenProperty:
    """Sign-in token generation."""

    def test_nonce_is_fresh_256_bit_hex(self) -> None:
        nonces = {generate_nonce() for _ in range(50)}

        assert len(nonces) == 50
        for nonce in nonces:
            assert nonce.startswith("0x")
            assert len(nonce) == 66
            int(nonce, 16)

    def test_account_signs_by_default(self) -> None:
        harness = Harness(chain_id=1, account=ACCOUNT)

        response = run_async(harness.client.generate_auth_token(ACCOUNT.address))

        assert response.access_token == "access"
        body = harness.payload(0)
        message = AuthTokenMessage(**body["message"])
        assert message.app == "test-app"
        assert message.message == "Please Sign In"
        assert message.principal == ACCOUNT.address
        signable = encode_typed_data(full_message=auth_typed_data(message))
        assert Account.recover_message(signable, signature=body["signature"]) == ACCOUNT.address

    @given(use_async=st.booleans(), text=st.text(min_size=1, max_size=30))
    @settings(max_examples=20, deadline=None)
    def test_custom_sign_function(self, use_async: bool, text: str) -> None:
        harness = Harness(chain_id=1)
        seen: list[AuthTokenMessage] = []

        def sign(message: AuthTokenMessage) -> str:
            seen.append(message)
            return "0xsigned"

        async def sign_async(message: AuthTokenMessage) -> str:
            return sign(message)

        run_async(harness.client.generate_auth_token(
            MINTER,
            sign_fn=sign_async if use_async else sign,
            message=text,
        ))

        assert len(seen) == 1
        assert seen[0].message == text
        assert harness.payload(0)["signature"] == "0xsigned"
        assert harness.payload(0)["message"]["nonce"] == seen[0].nonce


class TestClientConfigurationProperty:
    """Construction from configuration alone."""

    def test_builds_gateways_from_config(self) -> None:
        config = ClientConfig(
            chain_id=8453,
            backend_url="https://backend.test.invalid/",
            logging=LoggingConfig(enabled=True, level="debug", output_format="json"),
        )
        client = NamespaceClient(config)

        assert client.backend.base_url == "https://backend.test.invalid"
        assert client.chain.chain_name == "base"
        assert client.chain.is_read_only
