"""
Exceptions for the Sui wallet SDK.
"""
from typing import Optional


class SuiWalletError(Exception):
    """Base exception for all SDK errors."""
    pass


class ConfigurationError(SuiWalletError):
    """Raised when configuration loading or validation fails."""
    pass


class ValidationError(SuiWalletError):
    """Raised when caller-supplied input is malformed. Never retried."""
    pass


class MissingCredentialError(ValidationError):
    """Raised when no signing credential was supplied or configured."""
    pass


class InvalidCredentialLength(ValidationError):
    """Raised when a private key is not exactly 64 hex characters."""
    pass


class InvalidCredentialEncoding(ValidationError):
    """Raised when a private key is not valid hex or does not decode to 32 bytes."""
    pass


class InvalidAddressError(ValidationError):
    """Raised when an address or object id is not a 0x-prefixed 64 hex string."""
    pass


class InvalidAmountError(ValidationError):
    """Raised when an amount is not a positive integer number of MIST."""
    pass


class InvalidWalletObjectError(ValidationError):
    """Raised when a Wallet or coin object is missing or has the wrong type/owner."""
    pass


class InsufficientFundsError(SuiWalletError):
    """Raised when the sender cannot cover amount plus gas."""

    def __init__(self, balance: int, required: int, amount: Optional[int] = None, gas_budget: Optional[int] = None):
        self.balance = balance
        self.required = required
        self.amount = amount
        self.gas_budget = gas_budget
        message = f"Insufficient balance: {balance} MIST available, {required} MIST required"
        if amount is not None and gas_budget is not None:
            message += f" (amount {amount} + gas {gas_budget})"
        super().__init__(message)


class LedgerError(SuiWalletError):
    """Base class for failures reported by or while reaching the ledger."""
    pass


class LedgerTransportError(LedgerError):
    """Raised when the full node cannot be reached or answers with an RPC error."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class SimulationRejected(LedgerTransportError):
    """Raised when a dry run reports that the transaction would fail."""
    pass


class TransactionRejected(LedgerError):
    """
    Raised when the node accepted the transaction but execution failed.

    The network call succeeded; the effects status did not.
    """

    def __init__(self, detail: str, digest: Optional[str] = None):
        self.detail = detail
        self.digest = digest
        message = f"Transaction failed: {detail}"
        if digest:
            message += f" (digest {digest})"
        super().__init__(message)


class IntegrationError(SuiWalletError):
    """Raised when a ledger response is missing fields the SDK depends on."""
    pass
