"""
Pytest fixtures for the Sui wallet SDK tests.
"""
import base64
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import base58
import pytest

from suiwallet_sdk.client import WalletClient
from suiwallet_sdk.config import NetworkConfig, TransferConfig
from suiwallet_sdk.identity import derive_identity
from suiwallet_sdk.ledger import LedgerTransport
from suiwallet_sdk.models import CoinBalance, DryRunResult, ObjectData, OwnedObjectsPage, TransactionResult

# Test constants used throughout tests
TEST_RPC_URL = "https://rpc.example.com"
TEST_PRIV_KEY = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_OTHER_PRIV_KEY = "fedcba9876543210fedcba9876543210fedcba9876543210fedcba9876543210"
TEST_RECIPIENT = "0x" + "ab" * 32
TEST_PACKAGE_ID = "0x" + "11" * 32
TEST_MODULE = "wallet"
TEST_WALLET_ID = "0x" + "22" * 32
TEST_DEST_WALLET_ID = "0x" + "33" * 32
TEST_COIN_ID = "0x" + "44" * 32
TEST_TX_BYTES = base64.b64encode(b"transaction-data-bytes").decode("ascii")
TEST_DIGEST = base58.b58encode(bytes(range(32))).decode("ascii")
TEST_BALANCE = 10_000_000_000  # 10 SUI
TEST_GAS_BUDGET = 100_000_000

WALLET_TYPE = f"{TEST_PACKAGE_ID}::{TEST_MODULE}::Wallet"
WALLET_CREATED_EVENT = f"{TEST_PACKAGE_ID}::{TEST_MODULE}::WalletCreatedEvent"


def make_effects(
    status: str = "success",
    error: Optional[str] = None,
    computation: int = 1_000_000,
    storage: int = 2_000_000,
    created: Optional[List[str]] = None
) -> Dict[str, Any]:
    effects: Dict[str, Any] = {
        "status": {"status": status},
        "gasUsed": {
            "computationCost": str(computation),
            "storageCost": str(storage),
            "storageRebate": "500000",
            "nonRefundableStorageFee": "5000",
        },
    }
    if error:
        effects["status"]["error"] = error
    if created:
        effects["created"] = [
            {"owner": {"Shared": {"initial_shared_version": 3}},
             "reference": {"objectId": object_id, "version": 3, "digest": TEST_DIGEST}}
            for object_id in created
        ]
    return effects


def make_result(digest: str = TEST_DIGEST, events: Optional[List[Dict[str, Any]]] = None, **effects) -> TransactionResult:
    return TransactionResult.model_validate({
        "digest": digest,
        "effects": make_effects(**effects),
        "events": events or [],
    })


def make_dry_run(**effects) -> DryRunResult:
    return DryRunResult.model_validate({"effects": make_effects(**effects), "events": []})


def make_object(
    object_id: str,
    object_type: str,
    owner: Optional[str] = None,
    content: Optional[Dict[str, Any]] = None
) -> ObjectData:
    return ObjectData.model_validate({
        "objectId": object_id,
        "version": "7",
        "digest": TEST_DIGEST,
        "type": object_type,
        "owner": {"AddressOwner": owner} if owner else {"Shared": {"initial_shared_version": 3}},
        "content": content,
    })


def make_balance(total: int) -> CoinBalance:
    return CoinBalance.model_validate({
        "coinType": "0x2::sui::SUI",
        "coinObjectCount": 2,
        "totalBalance": str(total),
    })


@pytest.fixture(autouse=True)
def _clear_network_cache():
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def sender():
    return derive_identity(TEST_PRIV_KEY)


@pytest.fixture
def config():
    return TransferConfig(
        rpc_url=TEST_RPC_URL,
        package_id=TEST_PACKAGE_ID,
        module_name=TEST_MODULE,
    )


@pytest.fixture
def mock_transport():
    transport = MagicMock(spec=LedgerTransport)
    transport.get_balance.return_value = make_balance(TEST_BALANCE)
    transport.build_transaction.return_value = TEST_TX_BYTES
    transport.dry_run.return_value = make_dry_run()
    transport.execute.return_value = make_result()
    transport.get_object.return_value = None
    transport.get_owned_objects.return_value = OwnedObjectsPage()
    return transport


@pytest.fixture
def client(config, mock_transport):
    return WalletClient(config, transport=mock_transport)
