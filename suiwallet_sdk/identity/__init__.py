"""
Identity module for the Sui wallet SDK.

Handles private key parsing, Ed25519 key pair generation, Sui address
derivation and transaction signing.
"""
from suiwallet_sdk.identity.types import KeyPair
from suiwallet_sdk.identity.crypto import (
    derive_address,
    derive_identity,
    generate_keypair,
    keypair_from_secret,
    parse_private_key,
    sign_transaction,
    verify_transaction_signature,
)

__all__ = [
    'KeyPair',
    'derive_address',
    'derive_identity',
    'generate_keypair',
    'keypair_from_secret',
    'parse_private_key',
    'sign_transaction',
    'verify_transaction_signature',
]
