"""
Configuration for the Sui wallet SDK.

`NetworkConfig` resolves full-node endpoints from the packaged
``networks.json``. `TransferConfig` is the process-level settings object,
built once (usually from the environment) and never mutated.
"""
import importlib.resources
import json
import logging
import os
import urllib.parse
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError
from .utils import is_valid_address

logger = logging.getLogger(__name__)

GAS_POLICY_FIXED = "fixed"
GAS_POLICY_SIMULATED = "simulated"
GAS_POLICIES = (GAS_POLICY_FIXED, GAS_POLICY_SIMULATED)

DEFAULT_NETWORK = "testnet"
DEFAULT_FIXED_GAS_BUDGET = 100_000_000  # 0.1 SUI
DEFAULT_GAS_MARGIN = Decimal("1.2")


class NetworkConfig:
    """Registry of known Sui networks."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network definitions, caching them after the first read.

        Returns:
            Mapping of network name to its definition
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("suiwallet_sdk").joinpath("networks.json")
            cls._networks_cache = json.loads(resource.read_text(encoding="utf-8"))
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get one network definition.

        Raises:
            ConfigurationError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ConfigurationError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the full-node URL for a network.

        Precedence: explicit override, then ``<NETWORK>_RPC_URL`` from the
        environment, then the packaged default.
        """
        if override:
            return override
        env_var = f"{network.upper().replace('-', '_')}_RPC_URL"
        if os.environ.get(env_var):
            return os.environ[env_var]
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_tx_url(cls, network: str, digest: str) -> str:
        """Block explorer link for a transaction digest"""
        explorer = cls.get_network(network)["explorer"].rstrip("/")
        return f"{explorer}/tx/{digest}"


def validate_rpc_url(url: str, name: str = "rpc_url") -> str:
    """
    Require https unless the host is local.

    Raises:
        ConfigurationError: If the URL is not https and not localhost/127.0.0.1
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.hostname or ""
    is_local = host in ("localhost", "127.0.0.1")
    if parsed.scheme != "https" and not is_local:
        raise ConfigurationError(f"{name} must use https:// for security (got: {parsed.scheme}://)")
    return url


@dataclass(frozen=True)
class TransferConfig:
    """
    Immutable SDK settings.

    Attributes:
        network: Network name from networks.json
        rpc_url: Full-node URL; resolved from the network when omitted
        private_key: Default signing credential (hex), used when a call does not supply one
        package_id: Package holding the Wallet module
        module_name: Name of the Wallet module
        sender_wallet_object_id: Default source Wallet object for module transfers
        gas_policy: "fixed" or "simulated"
        fixed_gas_budget: Budget for the fixed policy, and the dry-run cap for the simulated one
        gas_margin: Multiplier applied to simulated gas costs
        min_amount_mist: Smallest accepted transfer amount (0 disables the check)
        retry_count: HTTP retries for read-only RPC calls
        timeout: HTTP timeout in seconds
        port: Port for the HTTP service
    """
    network: str = DEFAULT_NETWORK
    rpc_url: Optional[str] = None
    private_key: Optional[str] = field(default=None, repr=False)
    package_id: Optional[str] = None
    module_name: Optional[str] = None
    sender_wallet_object_id: Optional[str] = None
    gas_policy: str = GAS_POLICY_FIXED
    fixed_gas_budget: int = DEFAULT_FIXED_GAS_BUDGET
    gas_margin: Decimal = DEFAULT_GAS_MARGIN
    min_amount_mist: int = 0
    retry_count: int = 3
    timeout: int = 30
    port: int = 3001

    def __post_init__(self):
        if self.rpc_url is None:
            object.__setattr__(self, "rpc_url", NetworkConfig.get_rpc_url(self.network))
        validate_rpc_url(self.rpc_url)

        if self.gas_policy not in GAS_POLICIES:
            raise ConfigurationError(
                f"gas_policy must be one of {', '.join(GAS_POLICIES)} (got {self.gas_policy!r})"
            )
        if self.fixed_gas_budget <= 0:
            raise ConfigurationError("fixed_gas_budget must be a positive number of MIST")
        if not isinstance(self.gas_margin, Decimal):
            object.__setattr__(self, "gas_margin", Decimal(str(self.gas_margin)))
        if self.gas_margin < 1:
            raise ConfigurationError("gas_margin must be at least 1")
        if self.min_amount_mist < 0:
            raise ConfigurationError("min_amount_mist cannot be negative")
        # The node reports object ids and type strings in lowercase
        for field in ("package_id", "sender_wallet_object_id"):
            value = getattr(self, field)
            if value is None:
                continue
            if not is_valid_address(value):
                raise ConfigurationError(f"{field} is not a valid object id: {value!r}")
            object.__setattr__(self, field, value.lower())

    @property
    def has_wallet_module(self) -> bool:
        return bool(self.package_id and self.module_name)

    def move_target(self, function: str) -> str:
        """
        Fully qualified Move function, e.g. ``0x..::wallet::deposit``.

        Raises:
            ConfigurationError: If the package or module is not configured
        """
        if not self.has_wallet_module:
            raise ConfigurationError("PACKAGE_ID and MODULE_NAME must be set to use the Wallet module")
        return f"{self.package_id}::{self.module_name}::{function}"

    @property
    def wallet_type(self) -> str:
        return self.move_target("Wallet")

    @property
    def wallet_created_event_type(self) -> str:
        return self.move_target("WalletCreatedEvent")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TransferConfig":
        """
        Build the configuration from environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ

        def _int(name: str, default: int) -> int:
            raw = env.get(name)
            if raw in (None, ""):
                return default
            try:
                return int(raw.replace("_", ""))
            except ValueError as e:
                raise ConfigurationError(f"{name} must be an integer (got {raw!r})") from e

        raw_margin = env.get("GAS_MARGIN") or str(DEFAULT_GAS_MARGIN)
        try:
            gas_margin = Decimal(raw_margin)
        except InvalidOperation as e:
            raise ConfigurationError(f"GAS_MARGIN must be a number (got {raw_margin!r})") from e

        network = env.get("SUI_NETWORK") or DEFAULT_NETWORK
        config = cls(
            network=network,
            rpc_url=env.get("SUI_RPC_URL") or None,
            private_key=env.get("PRIVATE_KEY") or None,
            package_id=env.get("PACKAGE_ID") or None,
            module_name=env.get("MODULE_NAME") or None,
            sender_wallet_object_id=env.get("SENDER_WALLET_OBJECT_ID") or None,
            gas_policy=(env.get("GAS_POLICY") or GAS_POLICY_FIXED).lower(),
            fixed_gas_budget=_int("FIXED_GAS_BUDGET", DEFAULT_FIXED_GAS_BUDGET),
            gas_margin=gas_margin,
            min_amount_mist=_int("MIN_AMOUNT_MIST", 0),
            retry_count=_int("RPC_RETRY_COUNT", 3),
            timeout=_int("RPC_TIMEOUT", 30),
            port=_int("PORT", 3001),
        )
        logger.debug("Loaded configuration: %s", config)
        return config
