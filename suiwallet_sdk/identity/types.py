"""
Data types for the identity module.
"""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class KeyPair:
    """
    An Ed25519 key pair and the Sui address it owns.

    Attributes:
        secret_key: Raw 32-byte Ed25519 seed (excluded from repr)
        public_key: Raw 32-byte Ed25519 public key
        address: 0x-prefixed, 64 hex character Sui address
    """
    secret_key: bytes = field(repr=False)
    public_key: bytes
    address: str

    @property
    def private_key_hex(self) -> str:
        """Secret key as 64 hex characters without prefix"""
        return self.secret_key.hex()
