"""
Tests for the HTTP service.
"""
from unittest.mock import MagicMock

import pytest

from suiwallet_sdk.client import WalletClient
from suiwallet_sdk.models import GeneratedAddress, TransferOutcome
from suiwallet_sdk.server import _sanitize_payload, create_app, status_for

from conftest import (
    TEST_COIN_ID, TEST_DEST_WALLET_ID, TEST_DIGEST, TEST_PRIV_KEY, TEST_RECIPIENT, TEST_WALLET_ID, make_balance
)


@pytest.fixture
def http(client):
    """Test client backed by a WalletClient with a mocked transport"""
    return create_app(client=client).test_client()


@pytest.fixture
def stub_client():
    stub = MagicMock(spec=WalletClient)
    stub.transfer.return_value = TransferOutcome(success=True, transaction_digest=TEST_DIGEST)
    stub.transfer_to_wallet.return_value = TransferOutcome(success=True, transaction_digest=TEST_DIGEST)
    stub.transfer_to_address.return_value = TransferOutcome(success=True, transaction_digest=TEST_DIGEST)
    stub.deposit_to_wallet.return_value = TransferOutcome(success=True, transaction_digest=TEST_DIGEST)
    stub.receive_to_wallet.return_value = TransferOutcome(success=True, transaction_digest=TEST_DIGEST)
    return stub


@pytest.fixture
def stub_http(stub_client):
    return create_app(client=stub_client).test_client()


def test_fund_sui_address(http, mock_transport, sender):
    response = http.post("/api/fund-sui-address", json={
        "recipientAddress": TEST_RECIPIENT,
        "amount": 0.006,
        "senderPrivateKey": TEST_PRIV_KEY,
    })

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "transactionDigest": TEST_DIGEST,
        "senderAddress": sender.address,
    }
    assert mock_transport.build_transaction.call_args[0][0].amount == 6_000_000


def test_fund_missing_key(http, mock_transport):
    response = http.post("/api/fund-sui-address", json={"recipientAddress": TEST_RECIPIENT, "amount": 0.001})

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["error"].startswith("Private key is required")
    assert "errorCode" not in body and "error_code" not in body
    mock_transport.get_balance.assert_not_called()


def test_fund_short_key(http):
    response = http.post("/api/fund-sui-address", json={
        "recipientAddress": TEST_RECIPIENT,
        "amount": 0.001,
        "senderPrivateKey": "12345678",
    })

    assert response.status_code == 400
    assert "Invalid private key length: 8 characters" in response.get_json()["error"]


def test_fund_insufficient_balance(http, mock_transport):
    mock_transport.get_balance.return_value = make_balance(1)

    response = http.post("/api/expend-reward", json={
        "recipientAddress": TEST_RECIPIENT,
        "amountInMist": 1000,
        "senderPrivateKey": TEST_PRIV_KEY,
    })

    assert response.status_code == 500
    assert "Insufficient balance" in response.get_json()["error"]


@pytest.mark.parametrize("field", ["amountInMist", "amount"])
def test_fund_oversized_amount(http, mock_transport, field):
    response = http.post("/api/fund-sui-address", json={
        "recipientAddress": TEST_RECIPIENT,
        field: "1e30000000",
        "senderPrivateKey": TEST_PRIV_KEY,
    })

    assert response.status_code == 400
    assert "Amount too large" in response.get_json()["error"]
    mock_transport.get_balance.assert_not_called()


def test_non_json_body_is_a_validation_failure(http):
    response = http.post("/api/fund-sui-address", data="recipient=me", content_type="text/plain")

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_create_sui_address(http):
    response = http.post("/api/create-sui-address")

    body = response.get_json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["walletAddress"].startswith("0x")
    assert len(body["privateKey"]) == 64


def test_get_balance(http):
    response = http.get(f"/api/balance/{TEST_RECIPIENT}")

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "address": TEST_RECIPIENT,
        "balance": 10_000_000_000,
        "balanceSui": "10.000000000",
    }


def test_get_balance_invalid_address(http, mock_transport):
    response = http.get("/api/balance/0x1234")

    assert response.status_code == 400
    assert response.get_json()["success"] is False
    mock_transport.get_balance.assert_not_called()


def test_get_wallet_object(http):
    response = http.get(f"/api/wallet-object/{TEST_RECIPIENT}")

    assert response.status_code == 200
    assert response.get_json()["walletObjectId"] is None


def test_transfer_to_wallet_route(stub_http, stub_client):
    response = stub_http.post("/api/transfer-to-wallet", json={
        "destWalletId": TEST_DEST_WALLET_ID,
        "sourceWalletId": TEST_WALLET_ID,
        "amountInMist": "2500",
        "senderPrivateKey": TEST_PRIV_KEY,
    })

    assert response.status_code == 200
    stub_client.transfer_to_wallet.assert_called_once_with(
        destination_wallet_id=TEST_DEST_WALLET_ID,
        amount="2500",
        sender_private_key=TEST_PRIV_KEY,
        source_wallet_id=TEST_WALLET_ID,
        unit="mist",
    )


def test_transfer_to_address_route(stub_http, stub_client):
    response = stub_http.post("/api/transfer-to-address", json={
        "recipientAddress": TEST_RECIPIENT,
        "amount": 1.5,
    })

    assert response.status_code == 200
    stub_client.transfer_to_address.assert_called_once_with(
        recipient_address=TEST_RECIPIENT,
        amount=1.5,
        sender_private_key=None,
        source_wallet_id=None,
        unit="sui",
    )


def test_deposit_route(stub_http, stub_client):
    response = stub_http.post("/api/deposit-to-wallet", json={
        "walletId": TEST_WALLET_ID,
        "coinObjectId": TEST_COIN_ID,
    })

    assert response.status_code == 200
    stub_client.deposit_to_wallet.assert_called_once_with(
        wallet_id=TEST_WALLET_ID, coin_object_id=TEST_COIN_ID, sender_private_key=None
    )


def test_receive_route(stub_http, stub_client):
    response = stub_http.post("/api/receive-to-wallet", json={
        "walletId": TEST_WALLET_ID,
        "coinObjectId": TEST_COIN_ID,
        "senderPrivateKey": TEST_PRIV_KEY,
    })

    assert response.status_code == 200
    assert response.get_json()["transactionDigest"] == TEST_DIGEST
    stub_client.receive_to_wallet.assert_called_once_with(
        wallet_id=TEST_WALLET_ID, coin_object_id=TEST_COIN_ID, sender_private_key=TEST_PRIV_KEY
    )


def test_receive_route_invalid_wallet_id(http, mock_transport):
    response = http.post("/api/receive-to-wallet", json={"walletId": "0x12", "coinObjectId": TEST_COIN_ID})

    assert response.status_code == 400
    mock_transport.get_object.assert_not_called()


def test_create_wallet_route_failure_status(http):
    # no PRIVATE_KEY configured in the test client
    response = http.post("/api/create-wallet", json={"address": TEST_RECIPIENT})

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_create_wallet_route_invalid_address(http):
    response = http.post("/api/create-wallet", json={"address": "nope"})

    assert response.status_code == 400


def test_unhandled_error(stub_http, stub_client):
    stub_client.generate_address.side_effect = RuntimeError("entropy exhausted")

    response = stub_http.post("/api/create-sui-address")

    assert response.status_code == 500
    assert response.get_json() == {"success": False, "error": "Internal server error"}


def test_unknown_route(stub_http):
    response = stub_http.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_status_for():
    assert status_for(TransferOutcome(success=True, transaction_digest=TEST_DIGEST)) == 200
    assert status_for(TransferOutcome(success=False, error="x", error_code="InvalidAmountError")) == 400
    assert status_for(TransferOutcome(success=False, error="x", error_code="ValidationError")) == 400
    assert status_for(TransferOutcome(success=False, error="x", error_code="TransactionRejected")) == 500
    assert status_for(TransferOutcome(success=False, error="x", error_code="InternalError")) == 500


def test_sanitize_payload():
    payload = {"senderPrivateKey": TEST_PRIV_KEY, "amount": 1}

    assert _sanitize_payload(payload) == {"senderPrivateKey": "[REDACTED - 64 chars]", "amount": 1}
    assert payload["senderPrivateKey"] == TEST_PRIV_KEY
    assert _sanitize_payload(["x"]) == {"type": "<class 'list'>"}


def test_generated_address_response_shape(stub_http, stub_client):
    stub_client.generate_address.return_value = GeneratedAddress(wallet_address=TEST_RECIPIENT, private_key="ab" * 32)

    response = stub_http.post("/api/create-sui-address")

    assert response.get_json() == {"success": True, "walletAddress": TEST_RECIPIENT, "privateKey": "ab" * 32}
