"""
HTTP service exposing the wallet operations as JSON endpoints.

Each request is handled synchronously on its own thread; the WalletClient
and its connection pools are shared between requests.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from .client import WalletClient
from .config import TransferConfig
from .exceptions import SuiWalletError, ValidationError
from .models import TransferOutcome
from .utils import mist_to_sui

logger = logging.getLogger(__name__)

wallet_bp = Blueprint("wallet_bp", __name__)

SENSITIVE_FIELDS = ("senderPrivateKey", "privateKey")


def _validation_codes() -> frozenset:
    codes = set()
    pending = [ValidationError]
    while pending:
        cls = pending.pop()
        codes.add(cls.__name__)
        pending.extend(cls.__subclasses__())
    return frozenset(codes)


def status_for(outcome) -> int:
    """HTTP status for an outcome: 200, 400 for caller errors, 500 otherwise"""
    if outcome.success:
        return 200
    if outcome.error_code in _validation_codes():
        return 400
    return 500


def _sanitize_payload(payload: Any) -> Dict[str, Any]:
    """
    Remove secrets from a request body for logging

    Args:
        payload: Parsed JSON body

    Returns:
        Copy of the payload with credentials redacted
    """
    if not isinstance(payload, dict):
        return {"type": str(type(payload))}

    result = payload.copy()
    for name in SENSITIVE_FIELDS:
        if name in result:
            result[name] = f"[REDACTED - {len(str(result[name]))} chars]"
    return result


def _client() -> WalletClient:
    return current_app.config["WALLET_CLIENT"]


def _body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    logger.debug(f"{request.method} {request.path}: {_sanitize_payload(data)}")
    return data


def _amount(data: Dict[str, Any]) -> Tuple[Any, str]:
    """`amountInMist` when present, else `amount` in SUI"""
    if data.get("amountInMist") is not None:
        return data["amountInMist"], "mist"
    return data.get("amount"), "sui"


def _respond(outcome):
    return jsonify(outcome.to_response()), status_for(outcome)


def _error(exc: SuiWalletError):
    status = 400 if isinstance(exc, ValidationError) else 500
    return jsonify({"success": False, "error": str(exc)}), status


@wallet_bp.route("/api/create-sui-address", methods=["POST"])
def create_sui_address():
    generated = _client().generate_address()
    return jsonify({"success": True, **generated.model_dump(by_alias=True)}), 200


@wallet_bp.route("/api/balance/<address>", methods=["GET"])
def get_balance(address: str):
    try:
        balance = _client().get_balance(address)
    except SuiWalletError as e:
        logger.error(f"Balance lookup failed for {address}: {e}")
        return _error(e)
    return jsonify({
        "success": True,
        "address": address.lower(),
        "balance": balance,
        "balanceSui": mist_to_sui(balance),
    }), 200


@wallet_bp.route("/api/wallet-object/<address>", methods=["GET"])
def get_wallet_object(address: str):
    try:
        wallet_object_id = _client().find_wallet_object(address)
    except SuiWalletError as e:
        logger.error(f"Wallet lookup failed for {address}: {e}")
        return _error(e)
    return jsonify({"success": True, "address": address.lower(), "walletObjectId": wallet_object_id}), 200


def _native_transfer() -> Tuple[Any, int]:
    data = _body()
    amount, unit = _amount(data)
    outcome: TransferOutcome = _client().transfer(
        recipient_address=data.get("recipientAddress") or data.get("recipientWalletId"),
        amount=amount,
        sender_private_key=data.get("senderPrivateKey"),
        unit=unit,
    )
    return _respond(outcome)


@wallet_bp.route("/api/fund-sui-address", methods=["POST"])
def fund_sui_address():
    return _native_transfer()


@wallet_bp.route("/api/expend-reward", methods=["POST"])
def expend_reward():
    return _native_transfer()


@wallet_bp.route("/api/transfer-to-wallet", methods=["POST"])
def transfer_to_wallet():
    data = _body()
    amount, unit = _amount(data)
    outcome = _client().transfer_to_wallet(
        destination_wallet_id=data.get("destWalletId") or data.get("recipientWalletId"),
        amount=amount,
        sender_private_key=data.get("senderPrivateKey"),
        source_wallet_id=data.get("sourceWalletId"),
        unit=unit,
    )
    return _respond(outcome)


@wallet_bp.route("/api/transfer-to-address", methods=["POST"])
def transfer_to_address():
    data = _body()
    amount, unit = _amount(data)
    outcome = _client().transfer_to_address(
        recipient_address=data.get("recipientAddress"),
        amount=amount,
        sender_private_key=data.get("senderPrivateKey"),
        source_wallet_id=data.get("sourceWalletId"),
        unit=unit,
    )
    return _respond(outcome)


@wallet_bp.route("/api/deposit-to-wallet", methods=["POST"])
def deposit_to_wallet():
    data = _body()
    outcome = _client().deposit_to_wallet(
        wallet_id=data.get("walletId"),
        coin_object_id=data.get("coinObjectId"),
        sender_private_key=data.get("senderPrivateKey"),
    )
    return _respond(outcome)


@wallet_bp.route("/api/receive-to-wallet", methods=["POST"])
def receive_to_wallet():
    data = _body()
    outcome = _client().receive_to_wallet(
        wallet_id=data.get("walletId"),
        coin_object_id=data.get("coinObjectId"),
        sender_private_key=data.get("senderPrivateKey"),
    )
    return _respond(outcome)


@wallet_bp.route("/api/create-wallet", methods=["POST"])
def create_wallet():
    data = _body()
    outcome = _client().create_wallet(data.get("address"))
    return _respond(outcome)


def _internal_error(exc: Exception):
    if isinstance(exc, HTTPException):
        return jsonify({"success": False, "error": exc.description}), exc.code
    logger.exception("Unhandled error serving %s %s", request.method, request.path)
    return jsonify({"success": False, "error": "Internal server error"}), 500


def create_app(config: Optional[TransferConfig] = None, client: Optional[WalletClient] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        config: SDK settings; read from the environment when neither argument is given
        client: Pre-built client, mainly for tests

    Returns:
        Configured Flask app
    """
    if client is None:
        client = WalletClient(config or TransferConfig.from_env())

    app = Flask(__name__)
    app.config["WALLET_CLIENT"] = client
    app.register_blueprint(wallet_bp)
    app.register_error_handler(Exception, _internal_error)
    return app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    config = TransferConfig.from_env()
    app = create_app(config)
    logger.info(f"Serving on port {config.port} ({config.network}, {config.rpc_url})")
    app.run(host="0.0.0.0", port=config.port, threaded=True)


if __name__ == "__main__":
    main()
