"""
Transport layer for the Sui ledger.

This module defines the capability contract the SDK needs from a full node.
`RpcTransport` implements it over JSON-RPC; tests substitute mocks.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..models import CoinBalance, CoinObject, DryRunResult, ObjectData, OwnedObjectsPage, TransactionResult
from .instructions import TransferInstruction

logger = logging.getLogger(__name__)


class LedgerTransport(ABC):
    """
    Abstract base class for ledger access.

    Implementations raise `LedgerTransportError` when the node cannot be
    reached or returns an error, and `IntegrationError` when a response does
    not have the expected shape.
    """

    @abstractmethod
    def get_balance(self, address: str) -> CoinBalance:
        """Total SUI balance owned by an address"""
        pass

    @abstractmethod
    def get_coins(self, address: str) -> List[CoinObject]:
        """SUI coin objects owned by an address"""
        pass

    @abstractmethod
    def get_object(self, object_id: str) -> Optional[ObjectData]:
        """
        Look up object metadata.

        Returns:
            The object, or None if it does not exist
        """
        pass

    @abstractmethod
    def get_owned_objects(
        self,
        owner: str,
        struct_type: Optional[str] = None,
        cursor: Optional[str] = None
    ) -> OwnedObjectsPage:
        """One page of objects owned by an address, optionally filtered by type"""
        pass

    @abstractmethod
    def build_transaction(self, instruction: TransferInstruction) -> str:
        """
        Turn an instruction carrying a gas budget into base64 transaction bytes.
        """
        pass

    @abstractmethod
    def dry_run(self, tx_bytes: str) -> DryRunResult:
        """Execute speculatively without committing"""
        pass

    @abstractmethod
    def execute(self, tx_bytes: str, signatures: Sequence[str]) -> TransactionResult:
        """
        Submit a signed transaction and wait for local execution.

        Must not be retried by the transport.
        """
        pass

    def close(self) -> None:
        """Release any pooled connections."""
        pass


def get_transport(rpc_url: str, retry_count: int = 3, timeout: int = 30) -> LedgerTransport:
    """
    Get the JSON-RPC transport for a full node.

    Args:
        rpc_url: Full-node URL
        retry_count: HTTP retries for read-only calls
        timeout: Request timeout in seconds

    Returns:
        Transport implementation
    """
    from .rpc_transport import RpcTransport
    logger.debug("Using JSON-RPC transport for %s", rpc_url)
    return RpcTransport(rpc_url, retry_count=retry_count, timeout=timeout)
