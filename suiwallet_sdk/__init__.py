"""
Sui wallet SDK - funded SUI transfers and Wallet module operations.
"""
from .client import TransferStage, WalletClient
from .config import NetworkConfig, TransferConfig
from .exceptions import (
    ConfigurationError, InsufficientFundsError, IntegrationError, InvalidAddressError,
    InvalidAmountError, InvalidCredentialEncoding, InvalidCredentialLength, InvalidWalletObjectError,
    LedgerError, LedgerTransportError, MissingCredentialError, SimulationRejected, SuiWalletError,
    TransactionRejected, ValidationError
)
from .identity import KeyPair, derive_identity
from .ledger import MoveCallInstruction, NativeTransfer, TransferInstruction
from .models import GeneratedAddress, TransferOutcome, WalletCreationOutcome
from .utils import MIST_PER_SUI, mist_to_sui, to_mist
from .version import __version__

__all__ = [
    "WalletClient",
    "TransferStage",
    "TransferConfig",
    "NetworkConfig",
    "KeyPair",
    "derive_identity",
    "TransferInstruction",
    "NativeTransfer",
    "MoveCallInstruction",
    "TransferOutcome",
    "WalletCreationOutcome",
    "GeneratedAddress",
    "MIST_PER_SUI",
    "to_mist",
    "mist_to_sui",
    "SuiWalletError",
    "ConfigurationError",
    "ValidationError",
    "MissingCredentialError",
    "InvalidCredentialLength",
    "InvalidCredentialEncoding",
    "InvalidAddressError",
    "InvalidAmountError",
    "InvalidWalletObjectError",
    "InsufficientFundsError",
    "LedgerError",
    "LedgerTransportError",
    "SimulationRejected",
    "TransactionRejected",
    "IntegrationError",
    "__version__",
]
