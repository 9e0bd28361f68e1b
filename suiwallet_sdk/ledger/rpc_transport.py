"""
JSON-RPC transport for a Sui full node.

Read-only calls go through a session with retries; transaction execution
goes through a session without retries, since a blind resubmission is the
caller's decision to make.
"""
import itertools
import logging
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import pydantic
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions import InsufficientFundsError, IntegrationError, LedgerTransportError
from ..models import (
    CoinBalance, CoinObject, DryRunResult, ObjectData, OwnedObjectsPage, TransactionResult
)
from ..utils import SUI_COIN_TYPE
from .instructions import MoveCallInstruction, NativeTransfer, TransferInstruction
from .transport import LedgerTransport

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=pydantic.BaseModel)

# unsafe_paySui accepts at most this many input coins
MAX_INPUT_COINS = 255
PAGE_LIMIT = 50


class RpcTransport(LedgerTransport):
    """
    Ledger access over Sui JSON-RPC 2.0.

    Args:
        rpc_url: Full-node URL
        retry_count: Retries for read-only calls on connection errors and 5xx
        timeout: Timeout for each HTTP request in seconds
        session: Optional pre-built session for read-only calls
    """

    def __init__(
        self,
        rpc_url: str,
        retry_count: int = 3,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._ids = itertools.count(1)

        if session is None:
            session = requests.Session()
            retries = Retry(
                total=retry_count,
                backoff_factor=0.5,
                status_forcelist=[500, 502, 503, 504],
                allowed_methods=["POST"],
                raise_on_status=False,
                connect=retry_count,
                read=retry_count,
                other=retry_count
            )
            session.mount("http://", HTTPAdapter(max_retries=retries))
            session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session = session

        self.execute_session = requests.Session()
        self.execute_session.mount("http://", HTTPAdapter(max_retries=0))
        self.execute_session.mount("https://", HTTPAdapter(max_retries=0))

    def _call(self, method: str, params: List[Any], session: Optional[requests.Session] = None) -> Any:
        """
        Perform one JSON-RPC call and return its ``result``.

        Raises:
            LedgerTransportError: On network failure, HTTP error, invalid JSON or an RPC error object
            IntegrationError: If the envelope has neither ``result`` nor ``error``
        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug("RPC %s", method)

        try:
            response = (session or self.session).post(self.rpc_url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            logger.error(f"RPC {method} timed out: {e}")
            raise LedgerTransportError(f"Timed out calling {method}: {e}") from e
        except requests.RequestException as e:
            logger.error(f"RPC {method} failed: {e}")
            raise LedgerTransportError(f"Failed to reach full node calling {method}: {e}") from e

        if response.status_code >= 400:
            raise LedgerTransportError(
                f"Full node returned HTTP {response.status_code} for {method}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise LedgerTransportError(f"Invalid JSON response from full node for {method}: {e}") from e

        if not isinstance(body, dict):
            raise IntegrationError(f"Unexpected JSON-RPC envelope for {method}: {body!r}")

        error = body.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise LedgerTransportError(f"RPC error calling {method}: {message}", code=code)

        if "result" not in body:
            raise IntegrationError(f"JSON-RPC response for {method} has no result: {body!r}")
        return body["result"]

    @staticmethod
    def _parse(model: Type[M], data: Any, method: str) -> M:
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            raise IntegrationError(f"Unexpected {method} response shape: {e}") from e

    def get_balance(self, address: str) -> CoinBalance:
        result = self._call("suix_getBalance", [address, SUI_COIN_TYPE])
        return self._parse(CoinBalance, result, "suix_getBalance")

    def get_coins(self, address: str) -> List[CoinObject]:
        coins: List[CoinObject] = []
        cursor = None
        while len(coins) < MAX_INPUT_COINS:
            result = self._call("suix_getCoins", [address, SUI_COIN_TYPE, cursor, PAGE_LIMIT])
            if not isinstance(result, dict) or not isinstance(result.get("data"), list):
                raise IntegrationError(f"Unexpected suix_getCoins response shape: {result!r}")
            coins.extend(self._parse(CoinObject, item, "suix_getCoins") for item in result["data"])
            if not result.get("hasNextPage"):
                break
            cursor = result.get("nextCursor")
        return coins[:MAX_INPUT_COINS]

    def get_object(self, object_id: str) -> Optional[ObjectData]:
        options = {"showType": True, "showOwner": True, "showContent": True}
        result = self._call("sui_getObject", [object_id, options])
        if not isinstance(result, dict):
            raise IntegrationError(f"Unexpected sui_getObject response shape: {result!r}")
        if result.get("error"):
            logger.debug("Object %s not available: %s", object_id, result["error"])
            return None
        if "data" not in result:
            raise IntegrationError(f"sui_getObject response has neither data nor error: {result!r}")
        return self._parse(ObjectData, result["data"], "sui_getObject")

    def get_owned_objects(
        self,
        owner: str,
        struct_type: Optional[str] = None,
        cursor: Optional[str] = None
    ) -> OwnedObjectsPage:
        query: Dict[str, Any] = {"options": {"showType": True, "showOwner": True}}
        if struct_type:
            query["filter"] = {"StructType": struct_type}
        result = self._call("suix_getOwnedObjects", [owner, query, cursor, PAGE_LIMIT])
        if not isinstance(result, dict) or not isinstance(result.get("data"), list):
            raise IntegrationError(f"Unexpected suix_getOwnedObjects response shape: {result!r}")
        page = {
            "data": [item["data"] for item in result["data"] if isinstance(item, dict) and item.get("data")],
            "nextCursor": result.get("nextCursor"),
            "hasNextPage": result.get("hasNextPage", False),
        }
        return self._parse(OwnedObjectsPage, page, "suix_getOwnedObjects")

    def build_transaction(self, instruction: TransferInstruction) -> str:
        if instruction.gas_budget is None:
            raise ValueError(f"Instruction has no gas budget: {instruction.describe()}")

        if isinstance(instruction, NativeTransfer):
            coins = self.get_coins(instruction.sender)
            if not coins:
                raise InsufficientFundsError(
                    0, instruction.amount + instruction.gas_budget,
                    amount=instruction.amount, gas_budget=instruction.gas_budget
                )
            # largest coin first: pay_sui uses the first input coin for gas
            coins.sort(key=lambda coin: coin.balance, reverse=True)
            method = "unsafe_paySui"
            params = [
                instruction.sender,
                [coin.coin_object_id for coin in coins],
                [instruction.recipient],
                [str(instruction.amount)],
                str(instruction.gas_budget),
            ]
        elif isinstance(instruction, MoveCallInstruction):
            method = "unsafe_moveCall"
            params = [
                instruction.sender,
                instruction.package_id,
                instruction.module,
                instruction.function,
                list(instruction.type_arguments),
                list(instruction.arguments),
                None,
                str(instruction.gas_budget),
                None,
            ]
        else:
            raise TypeError(f"Unsupported instruction type: {type(instruction).__name__}")

        result = self._call(method, params)
        if not isinstance(result, dict) or not result.get("txBytes"):
            raise IntegrationError(f"{method} response has no txBytes: {result!r}")
        return result["txBytes"]

    def dry_run(self, tx_bytes: str) -> DryRunResult:
        result = self._call("sui_dryRunTransactionBlock", [tx_bytes])
        return self._parse(DryRunResult, result, "sui_dryRunTransactionBlock")

    def execute(self, tx_bytes: str, signatures: Sequence[str]) -> TransactionResult:
        options = {"showEffects": True, "showEvents": True}
        result = self._call(
            "sui_executeTransactionBlock",
            [tx_bytes, list(signatures), options, "WaitForLocalExecution"],
            session=self.execute_session,
        )
        return self._parse(TransactionResult, result, "sui_executeTransactionBlock")

    def close(self) -> None:
        self.session.close()
        self.execute_session.close()
