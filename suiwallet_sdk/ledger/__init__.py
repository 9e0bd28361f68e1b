"""
Ledger module for the Sui wallet SDK.

Provides the transport contract for talking to a Sui full node and the
instruction types describing transactions to build.
"""
from .instructions import MoveCallInstruction, NativeTransfer, TransferInstruction
from .transport import LedgerTransport, get_transport
from .rpc_transport import RpcTransport

__all__ = [
    'LedgerTransport',
    'RpcTransport',
    'get_transport',
    'TransferInstruction',
    'NativeTransfer',
    'MoveCallInstruction',
]
