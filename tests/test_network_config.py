"""
Tests for NetworkConfig and TransferConfig.
"""
import dataclasses
from decimal import Decimal
from unittest.mock import patch

import pytest

from suiwallet_sdk.config import (
    DEFAULT_FIXED_GAS_BUDGET, GAS_POLICY_SIMULATED, NetworkConfig, TransferConfig, validate_rpc_url
)
from suiwallet_sdk.exceptions import ConfigurationError

from conftest import TEST_PACKAGE_ID, TEST_PRIV_KEY, TEST_RPC_URL, TEST_WALLET_ID

MOCK_NETWORKS = {
    "test-network": {
        "rpc": "https://test.example.com",
        "explorer": "https://explorer.example.com/",
    }
}


class TestNetworkConfig:
    """Test NetworkConfig class."""

    def test_load_networks_cached(self):
        """Networks are cached after first load."""
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch("importlib.resources.files") as mock_files:
            result = NetworkConfig.load_networks()
            mock_files.assert_not_called()

        assert result == MOCK_NETWORKS

    def test_load_packaged_networks(self):
        networks = NetworkConfig.load_networks()

        assert set(networks) >= {"mainnet", "testnet", "devnet", "localnet"}
        assert networks["testnet"]["rpc"] == "https://fullnode.testnet.sui.io:443"

    def test_get_network_unknown(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with pytest.raises(ConfigurationError) as exc_info:
            NetworkConfig.get_network("nope")

        assert "Unknown network 'nope'" in str(exc_info.value)
        assert "test-network" in str(exc_info.value)

    def test_get_rpc_url_override(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        assert NetworkConfig.get_rpc_url("test-network", "https://override.example.com") == "https://override.example.com"

    def test_get_rpc_url_from_env(self, monkeypatch):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        monkeypatch.setenv("TEST_NETWORK_RPC_URL", "https://env.example.com")

        assert NetworkConfig.get_rpc_url("test-network") == "https://env.example.com"

    def test_get_rpc_url_default(self, monkeypatch):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        monkeypatch.delenv("TEST_NETWORK_RPC_URL", raising=False)

        assert NetworkConfig.get_rpc_url("test-network") == "https://test.example.com"

    def test_get_tx_url(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        assert NetworkConfig.get_tx_url("test-network", "abc") == "https://explorer.example.com/tx/abc"


@pytest.mark.parametrize("url", [
    "https://fullnode.testnet.sui.io:443",
    "http://localhost:9000",
    "http://127.0.0.1:9000",
])
def test_validate_rpc_url_accepts(url):
    assert validate_rpc_url(url) == url


def test_validate_rpc_url_rejects_plain_http():
    with pytest.raises(ConfigurationError, match="https"):
        validate_rpc_url("http://fullnode.example.com")


class TestTransferConfig:
    """Test TransferConfig construction and environment loading."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TESTNET_RPC_URL", raising=False)
        config = TransferConfig()

        assert config.network == "testnet"
        assert config.rpc_url == "https://fullnode.testnet.sui.io:443"
        assert config.gas_policy == "fixed"
        assert config.fixed_gas_budget == DEFAULT_FIXED_GAS_BUDGET
        assert config.gas_margin == Decimal("1.2")
        assert config.has_wallet_module is False

    def test_frozen(self):
        config = TransferConfig(rpc_url=TEST_RPC_URL)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.gas_policy = "simulated"

    def test_repr_hides_private_key(self):
        config = TransferConfig(rpc_url=TEST_RPC_URL, private_key=TEST_PRIV_KEY)
        assert TEST_PRIV_KEY not in repr(config)

    @pytest.mark.parametrize("kwargs", [
        {"gas_policy": "guess"},
        {"fixed_gas_budget": 0},
        {"gas_margin": Decimal("0.5")},
        {"min_amount_mist": -1},
        {"package_id": "0x1234"},
        {"sender_wallet_object_id": "wallet"},
        {"rpc_url": "http://fullnode.example.com"},
        {"network": "nope", "rpc_url": None},
    ])
    def test_invalid_values(self, kwargs):
        params = {"rpc_url": TEST_RPC_URL}
        params.update(kwargs)
        with pytest.raises(ConfigurationError):
            TransferConfig(**params)

    def test_float_margin_is_converted(self):
        config = TransferConfig(rpc_url=TEST_RPC_URL, gas_margin=1.5)
        assert config.gas_margin == Decimal("1.5")

    def test_move_target(self):
        config = TransferConfig(rpc_url=TEST_RPC_URL, package_id=TEST_PACKAGE_ID, module_name="wallet")

        assert config.move_target("deposit") == f"{TEST_PACKAGE_ID}::wallet::deposit"
        assert config.wallet_type == f"{TEST_PACKAGE_ID}::wallet::Wallet"
        assert config.wallet_created_event_type == f"{TEST_PACKAGE_ID}::wallet::WalletCreatedEvent"

    def test_object_ids_are_lowercased(self):
        package_id = "0x" + "Ab" * 32
        config = TransferConfig(
            rpc_url=TEST_RPC_URL,
            package_id=package_id,
            module_name="wallet",
            sender_wallet_object_id="0x" + "CD" * 32,
        )

        assert config.package_id == package_id.lower()
        assert config.sender_wallet_object_id == "0x" + "cd" * 32
        assert config.wallet_type == "0x" + "ab" * 32 + "::wallet::Wallet"

    def test_move_target_without_module(self):
        with pytest.raises(ConfigurationError, match="PACKAGE_ID and MODULE_NAME"):
            TransferConfig(rpc_url=TEST_RPC_URL).move_target("deposit")

    def test_from_env(self):
        config = TransferConfig.from_env({
            "SUI_NETWORK": "devnet",
            "SUI_RPC_URL": TEST_RPC_URL,
            "PRIVATE_KEY": TEST_PRIV_KEY,
            "PACKAGE_ID": TEST_PACKAGE_ID,
            "MODULE_NAME": "wallet",
            "SENDER_WALLET_OBJECT_ID": TEST_WALLET_ID,
            "GAS_POLICY": "Simulated",
            "FIXED_GAS_BUDGET": "50_000_000",
            "GAS_MARGIN": "1.3",
            "MIN_AMOUNT_MIST": "1000",
            "RPC_RETRY_COUNT": "5",
            "RPC_TIMEOUT": "10",
            "PORT": "8080",
        })

        assert config.network == "devnet"
        assert config.rpc_url == TEST_RPC_URL
        assert config.private_key == TEST_PRIV_KEY
        assert config.gas_policy == GAS_POLICY_SIMULATED
        assert config.fixed_gas_budget == 50_000_000
        assert config.gas_margin == Decimal("1.3")
        assert config.min_amount_mist == 1000
        assert config.retry_count == 5
        assert config.timeout == 10
        assert config.port == 8080
        assert config.has_wallet_module is True

    def test_from_env_empty(self, monkeypatch):
        monkeypatch.delenv("TESTNET_RPC_URL", raising=False)
        config = TransferConfig.from_env({})

        assert config.network == "testnet"
        assert config.private_key is None
        assert config.port == 3001

    @pytest.mark.parametrize("env", [
        {"FIXED_GAS_BUDGET": "lots"},
        {"GAS_MARGIN": "x"},
        {"PORT": "eighty"},
        {"SUI_NETWORK": "moonnet"},
    ])
    def test_from_env_invalid(self, env):
        with pytest.raises(ConfigurationError):
            TransferConfig.from_env(env)
