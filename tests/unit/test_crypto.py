"""
Unit tests for cryptographic primitives.

Tests cover:
1. Key generation and address derivation
2. Recoverable signing
3. Signer recovery, including malformed signatures
"""

import pytest

from lazyauction.crypto import (
    SECP256K1_ORDER,
    address_from_public_key,
    generate_keypair,
    hex_to_bytes,
    bytes_to_hex,
    is_valid_address,
    keccak256,
    normalize_address,
    private_key_to_public_key,
    recover_address,
    recover_public_key,
    sign_recoverable,
)


class TestKeyGeneration:
    """Tests for key generation."""

    def test_keypair_lengths(self):
        kp = generate_keypair()
        assert len(kp.private_key) == 32
        assert len(kp.public_key) == 64

    def test_address_format(self):
        """Address should be 0x-prefixed 40 hex chars."""
        kp = generate_keypair()
        assert kp.address.startswith("0x")
        assert len(kp.address) == 42
        assert is_valid_address(kp.address)

    def test_derive_public_key_from_private(self):
        kp = generate_keypair()
        assert private_key_to_public_key(kp.private_key) == kp.public_key

    def test_known_address(self):
        """Private key 1 maps to the well-known generator-point address."""
        private_key = (1).to_bytes(32, byteorder="big")
        public_key = private_key_to_public_key(private_key)
        assert address_from_public_key(public_key) == "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"


class TestHashing:

    def test_keccak_empty(self):
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_keccak_length(self):
        assert len(keccak256(b"voucher")) == 32


class TestRecoverableSignatures:
    """Tests for signing and signer recovery."""

    def test_signature_layout(self):
        kp = generate_keypair()
        sig = sign_recoverable(keccak256(b"message"), kp.private_key)
        assert len(sig) == 65
        assert sig[64] in (27, 28)

    def test_low_s(self):
        kp = generate_keypair()
        sig = sign_recoverable(keccak256(b"message"), kp.private_key)
        s = int.from_bytes(sig[32:64], byteorder="big")
        assert s <= SECP256K1_ORDER // 2

    def test_recover_signer(self):
        kp = generate_keypair()
        digest = keccak256(b"recovery test")
        sig = sign_recoverable(digest, kp.private_key)
        assert recover_public_key(digest, sig) == kp.public_key
        assert recover_address(digest, sig) == kp.address

    def test_signing_is_deterministic(self):
        kp = generate_keypair()
        digest = keccak256(b"same message")
        assert sign_recoverable(digest, kp.private_key) == sign_recoverable(digest, kp.private_key)

    def test_different_message_recovers_other_address(self):
        kp = generate_keypair()
        sig = sign_recoverable(keccak256(b"message 1"), kp.private_key)
        assert recover_address(keccak256(b"message 2"), sig) != kp.address

    def test_zero_based_recovery_id_accepted(self):
        kp = generate_keypair()
        digest = keccak256(b"v offset")
        sig = sign_recoverable(digest, kp.private_key)
        sig = sig[:64] + bytes([sig[64] - 27])
        assert recover_address(digest, sig) == kp.address

    @pytest.mark.parametrize("signature", [
        b"",
        b"\x00" * 64,
        b"\x00" * 65,
        b"\x01" * 66,
    ])
    def test_malformed_signature(self, signature):
        assert recover_address(keccak256(b"x"), signature) is None

    def test_bad_recovery_id(self):
        kp = generate_keypair()
        digest = keccak256(b"x")
        sig = sign_recoverable(digest, kp.private_key)
        assert recover_address(digest, sig[:64] + bytes([35])) is None

    def test_high_s_rejected(self):
        kp = generate_keypair()
        digest = keccak256(b"malleable")
        sig = sign_recoverable(digest, kp.private_key)
        s = int.from_bytes(sig[32:64], byteorder="big")
        flipped_v = 55 - sig[64]  # 27 <-> 28
        twin = sig[:32] + (SECP256K1_ORDER - s).to_bytes(32, byteorder="big") + bytes([flipped_v])
        assert recover_address(digest, twin) is None

    def test_sign_rejects_bad_lengths(self):
        kp = generate_keypair()
        with pytest.raises(ValueError):
            sign_recoverable(b"short", kp.private_key)
        with pytest.raises(ValueError):
            sign_recoverable(keccak256(b"x"), b"short")


class TestAddressHelpers:

    def test_normalize_lowercases(self):
        assert normalize_address("0x" + "AB" * 20) == "0x" + "ab" * 20

    def test_normalize_rejects_garbage(self):
        with pytest.raises(ValueError):
            normalize_address("not-an-address")

    def test_hex_roundtrip(self):
        data = b"\x01\x02\xff"
        assert hex_to_bytes(bytes_to_hex(data)) == data
        assert hex_to_bytes("0102ff") == data
