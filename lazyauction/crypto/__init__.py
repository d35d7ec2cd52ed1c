"""
Cryptographic primitives for LazyAuction.

This module provides:
- Keccak-256 hashing
- Key generation on secp256k1
- Recoverable ECDSA signatures (r || s || v, Ethereum layout)
- Signer address recovery

Design Notes:
-------------
Vouchers are signed off-line by the issuer and checked on-line by recovering
the signer address from the signature, the same way an EVM contract does with
ecrecover. Nothing in the engine needs the issuer's public key up front; the
configured issuer address is enough.
"""

import secrets
from dataclasses import dataclass
from typing import Optional

from Crypto.Hash import keccak
from py_ecc.secp256k1 import secp256k1


# =============================================================================
# Constants
# =============================================================================

# secp256k1 curve order (number of points on the curve)
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

SIGNATURE_LENGTH = 65
ZERO_ADDRESS = "0x" + "00" * 20


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: typed-data digests, address derivation.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Addresses
# =============================================================================


def address_from_public_key(public_key: bytes) -> str:
    """
    Derive an address from a 64-byte public key.

    Address = last 20 bytes of keccak256(public_key), hex-encoded with 0x prefix.
    """
    if len(public_key) != 64:
        raise ValueError("Public key must be 64 bytes")
    return "0x" + keccak256(public_key)[-20:].hex()


def is_valid_address(address: str) -> bool:
    """Check if string is a valid address format."""
    if not isinstance(address, str) or not address.startswith("0x"):
        return False
    if len(address) != 42:  # 0x + 40 hex chars
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def normalize_address(address: str) -> str:
    """Lower-case an address so identities compare by value."""
    if not is_valid_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return address.lower()


def address_to_bytes(address: str) -> bytes:
    return bytes.fromhex(normalize_address(address)[2:])


# =============================================================================
# Key Generation
# =============================================================================


@dataclass
class KeyPair:
    """
    An ECDSA keypair on secp256k1.

    Attributes:
        private_key: 32-byte secret key (integer in [1, order-1])
        public_key: 64-byte uncompressed public key (x || y coordinates)
    """
    private_key: bytes  # 32 bytes
    public_key: bytes   # 64 bytes (uncompressed, no 0x04 prefix)

    @property
    def address(self) -> str:
        return address_from_public_key(self.public_key)


def private_key_to_public_key(private_key: bytes) -> bytes:
    """
    Derive public key from private key.

    Args:
        private_key: 32-byte private key

    Returns:
        64-byte uncompressed public key
    """
    if len(private_key) != 32:
        raise ValueError("Private key must be 32 bytes")

    x, y = secp256k1.privtopub(private_key)
    return x.to_bytes(32, byteorder="big") + y.to_bytes(32, byteorder="big")


def generate_keypair() -> KeyPair:
    """Generate a new random keypair from a CSPRNG."""
    private_key_int = secrets.randbelow(SECP256K1_ORDER - 1) + 1
    private_key = private_key_int.to_bytes(32, byteorder="big")
    return KeyPair(private_key=private_key, public_key=private_key_to_public_key(private_key))


def keypair_from_private_key(private_key: bytes) -> KeyPair:
    return KeyPair(private_key=private_key, public_key=private_key_to_public_key(private_key))


# =============================================================================
# Recoverable Signatures
# =============================================================================


def sign_recoverable(message_hash: bytes, private_key: bytes) -> bytes:
    """
    Sign a 32-byte digest, returning a 65-byte r || s || v signature.

    py_ecc already produces low-s signatures with a matching v (27/28).
    """
    if len(message_hash) != 32:
        raise ValueError("Message hash must be 32 bytes")
    if len(private_key) != 32:
        raise ValueError("Private key must be 32 bytes")

    v, r, s = secp256k1.ecdsa_raw_sign(message_hash, private_key)
    return r.to_bytes(32, byteorder="big") + s.to_bytes(32, byteorder="big") + bytes([v])


def recover_public_key(message_hash: bytes, signature: bytes) -> Optional[bytes]:
    """
    Recover the 64-byte public key that produced a 65-byte signature.

    Returns None for any malformed or unrecoverable signature.
    """
    if len(message_hash) != 32 or len(signature) != SIGNATURE_LENGTH:
        return None

    r = int.from_bytes(signature[:32], byteorder="big")
    s = int.from_bytes(signature[32:64], byteorder="big")
    v = signature[64]
    if v in (0, 1):
        v += 27

    if v not in (27, 28):
        return None
    if not (1 <= r < SECP256K1_ORDER and 1 <= s < SECP256K1_ORDER):
        return None
    # Reject the high-s twin (EIP-2)
    if s > SECP256K1_ORDER // 2:
        return None

    try:
        recovered = secp256k1.ecdsa_raw_recover(message_hash, (v, r, s))
    except (ValueError, ZeroDivisionError):
        return None
    if not recovered:
        return None

    x, y = recovered
    return x.to_bytes(32, byteorder="big") + y.to_bytes(32, byteorder="big")


def recover_address(message_hash: bytes, signature: bytes) -> Optional[str]:
    """Recover the signer address, or None if the signature is unusable."""
    public_key = recover_public_key(message_hash, signature)
    if public_key is None:
        return None
    return address_from_public_key(public_key)


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)
