"""
Transfer instructions.

An instruction describes a transaction; it is turned into signed bytes and
executed by a `LedgerTransport`, never by the instruction itself.
"""
import dataclasses
from dataclasses import dataclass
from typing import Any, Optional, Tuple


class TransferInstruction:
    """Common behaviour of instruction shapes."""

    sender: str
    gas_budget: Optional[int]

    def with_gas_budget(self, gas_budget: int) -> "TransferInstruction":
        """Return a copy annotated with the given gas budget"""
        if gas_budget <= 0:
            raise ValueError(f"gas budget must be positive, got {gas_budget}")
        return dataclasses.replace(self, gas_budget=gas_budget)

    def describe(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class NativeTransfer(TransferInstruction):
    """Split `amount` MIST off the sender's gas coin and send it to `recipient`."""
    sender: str
    recipient: str
    amount: int
    gas_budget: Optional[int] = None

    def describe(self) -> str:
        return f"native transfer of {self.amount} MIST {self.sender} -> {self.recipient}"


@dataclass(frozen=True)
class MoveCallInstruction(TransferInstruction):
    """
    Call a Move function, e.g. ``<package>::wallet::transfer_to_wallet``.

    `arguments` are JSON-RPC ready: object ids and addresses as hex strings,
    u64 values as decimal strings.
    """
    sender: str
    package_id: str
    module: str
    function: str
    arguments: Tuple[Any, ...] = ()
    type_arguments: Tuple[str, ...] = ()
    gas_budget: Optional[int] = None

    @property
    def target(self) -> str:
        return f"{self.package_id}::{self.module}::{self.function}"

    def describe(self) -> str:
        return f"move call {self.target} from {self.sender}"
