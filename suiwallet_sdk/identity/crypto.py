"""
Cryptographic operations for the identity module.

Sui Ed25519 conventions:
    address   = blake2b-256(0x00 || public_key)
    signature = base64(0x00 || ed25519_sign(blake2b-256(intent || tx_bytes)) || public_key)
"""
import base64
import hashlib
import logging
import string
from typing import Optional, Tuple

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives.serialization import (
    Encoding, PrivateFormat, PublicFormat, NoEncryption
)

from ..exceptions import (
    MissingCredentialError, InvalidCredentialLength, InvalidCredentialEncoding
)
from ..utils import strip_hex_prefix
from .types import KeyPair

logger = logging.getLogger(__name__)

ED25519_FLAG = b"\x00"
# TransactionData intent: scope=0, version=0, app_id=0 (Sui)
TRANSACTION_INTENT = b"\x00\x00\x00"
PRIVATE_KEY_HEX_LENGTH = 64
PRIVATE_KEY_BYTE_LENGTH = 32

_HEX_DIGITS = frozenset(string.hexdigits)


def blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def parse_private_key(credential_hex: Optional[str]) -> bytes:
    """
    Decode a hex private key into its 32 raw bytes.

    Args:
        credential_hex: 64 hex characters, optionally 0x-prefixed

    Returns:
        32-byte secret key

    Raises:
        MissingCredentialError: If no key was given
        InvalidCredentialLength: If the key is not 64 characters after the prefix
        InvalidCredentialEncoding: If the key is not hex or not 32 bytes
    """
    if not credential_hex:
        raise MissingCredentialError(
            "Private key is required (pass senderPrivateKey or set PRIVATE_KEY)"
        )
    if not isinstance(credential_hex, str):
        raise InvalidCredentialEncoding(
            f"Private key must be a hex string, got {type(credential_hex).__name__}"
        )

    key = strip_hex_prefix(credential_hex.strip())
    if len(key) != PRIVATE_KEY_HEX_LENGTH:
        raise InvalidCredentialLength(
            f"Invalid private key length: {len(key)} characters (expected {PRIVATE_KEY_HEX_LENGTH})"
        )
    if not _HEX_DIGITS.issuperset(key):
        raise InvalidCredentialEncoding("Invalid hex string in private key")

    secret = bytes.fromhex(key)
    if len(secret) != PRIVATE_KEY_BYTE_LENGTH:
        raise InvalidCredentialEncoding(
            f"Invalid private key byte length: {len(secret)} bytes (expected {PRIVATE_KEY_BYTE_LENGTH})"
        )
    return secret


def derive_address(public_key: bytes) -> str:
    """
    Derive the Sui address owned by an Ed25519 public key.

    Args:
        public_key: Raw 32-byte public key

    Returns:
        0x-prefixed 64 hex character address
    """
    return "0x" + blake2b_256(ED25519_FLAG + public_key).hex()


def keypair_from_secret(secret_key: bytes) -> KeyPair:
    """Build a KeyPair from a raw 32-byte seed"""
    private_key = Ed25519PrivateKey.from_private_bytes(secret_key)
    public_key = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return KeyPair(
        secret_key=bytes(secret_key),
        public_key=public_key,
        address=derive_address(public_key),
    )


def derive_identity(credential_hex: Optional[str]) -> KeyPair:
    """
    Validate a hex private key and derive its key pair and address.

    Deterministic: the same credential always yields the same address.
    """
    return keypair_from_secret(parse_private_key(credential_hex))


def generate_keypair() -> KeyPair:
    """
    Generate a fresh Ed25519 key pair.

    Returns:
        KeyPair with a newly derived address
    """
    private_key = Ed25519PrivateKey.generate()
    secret = private_key.private_bytes(
        encoding=Encoding.Raw,
        format=PrivateFormat.Raw,
        encryption_algorithm=NoEncryption()
    )
    keypair = keypair_from_secret(secret)
    logger.info("Generated address %s", keypair.address)
    return keypair


def transaction_digest_to_sign(tx_bytes: bytes) -> bytes:
    """Hash signed by the sender: blake2b-256 over the intent message"""
    return blake2b_256(TRANSACTION_INTENT + tx_bytes)


def sign_transaction(tx_bytes_b64: str, keypair: KeyPair) -> str:
    """
    Sign base64 transaction bytes as returned by the transaction builder.

    Args:
        tx_bytes_b64: Base64 BCS TransactionData
        keypair: Sender key pair

    Returns:
        Base64 serialized signature (flag || signature || public key)
    """
    tx_bytes = base64.b64decode(tx_bytes_b64)
    private_key = Ed25519PrivateKey.from_private_bytes(keypair.secret_key)
    signature = private_key.sign(transaction_digest_to_sign(tx_bytes))
    return base64.b64encode(ED25519_FLAG + signature + keypair.public_key).decode("ascii")


def split_signature(serialized: str) -> Tuple[bytes, bytes, bytes]:
    """
    Split a serialized signature into (flag, signature, public_key).

    Raises:
        ValueError: If the serialized signature does not have the Ed25519 layout
    """
    raw = base64.b64decode(serialized)
    if len(raw) != 1 + 64 + 32:
        raise ValueError(f"Unexpected signature length: {len(raw)} bytes")
    return raw[:1], raw[1:65], raw[65:]


def verify_transaction_signature(tx_bytes_b64: str, serialized: str) -> bool:
    """Check a serialized signature against transaction bytes"""
    flag, signature, public_key = split_signature(serialized)
    if flag != ED25519_FLAG:
        return False
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(
            signature, transaction_digest_to_sign(base64.b64decode(tx_bytes_b64))
        )
    except Exception as e:
        logger.debug("Signature verification failed: %s", e)
        return False
    return True
