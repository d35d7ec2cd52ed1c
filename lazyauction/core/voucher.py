"""
Voucher - Issuer-signed sale authorization for lazy minting.

Conceptual Background:
---------------------
The issuer never mints up front. Instead it signs a voucher off-line that
says "asset N, with this metadata, may be sold for at least P". The engine
treats a voucher whose recovered signer equals the configured issuer as the
only proof of consent it needs.

Signed Message:
--------------
The signature covers an EIP-712 typed-data digest:

    digest = keccak256(0x19 || 0x01 || domain_separator || struct_hash)

    domain_separator = keccak256(
        DOMAIN_TYPEHASH || keccak256(name) || keccak256(version)
        || uint256(chain_id) || address(verifying_contract)
    )

    struct_hash = keccak256(
        VOUCHER_TYPEHASH || uint256(asset_id) || keccak256(metadata_uri)
        || uint256(minimum_price)
    )

The domain separator binds a voucher to one auction instance on one chain,
so a voucher signed for one deployment is rejected by every other.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from lazyauction.core.errors import InvalidSignature
from lazyauction.crypto import (
    address_to_bytes,
    bytes_to_hex,
    hex_to_bytes,
    keccak256,
    normalize_address,
    recover_address,
    sign_recoverable,
)
from lazyauction.utils.logger import get_logger

logger = get_logger("voucher")


# =============================================================================
# Constants
# =============================================================================

UINT256_MAX = 2**256 - 1

DEFAULT_SIGNING_DOMAIN = "LazyNFT-Voucher"
DEFAULT_SIGNATURE_VERSION = "1"

DOMAIN_TYPEHASH = keccak256(
    b"EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
VOUCHER_TYPEHASH = keccak256(b"NFTVoucher(uint256 tokenId,string uri,uint256 minPrice)")

# signature recovery primitive: (digest, signature) -> signer address or None
Recoverer = Callable[[bytes, bytes], Optional[str]]


def encode_uint256(value: int) -> bytes:
    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"Value {value} out of uint256 range")
    return value.to_bytes(32, byteorder="big")


def encode_address(address: str) -> bytes:
    return b"\x00" * 12 + address_to_bytes(address)


# =============================================================================
# Domain
# =============================================================================


@dataclass(frozen=True)
class VoucherDomain:
    """
    Identity of the auction instance a voucher is valid for.

    Attributes:
        verifying_contract: Address of this auction instance
        chain_id: Chain identifier
        name: Signing domain name
        version: Signing domain version
    """
    verifying_contract: str
    chain_id: int
    name: str = DEFAULT_SIGNING_DOMAIN
    version: str = DEFAULT_SIGNATURE_VERSION

    def __post_init__(self):
        object.__setattr__(self, "verifying_contract", normalize_address(self.verifying_contract))
        if self.chain_id < 0:
            raise ValueError(f"chain_id must be non-negative, got {self.chain_id}")

    def separator(self) -> bytes:
        return keccak256(
            DOMAIN_TYPEHASH
            + keccak256(self.name.encode("utf-8"))
            + keccak256(self.version.encode("utf-8"))
            + encode_uint256(self.chain_id)
            + encode_address(self.verifying_contract)
        )


# =============================================================================
# Voucher
# =============================================================================


@dataclass(frozen=True)
class Voucher:
    """
    Signed authorization to sell one asset above a floor price.

    Attributes:
        asset_id: Identifier of the asset to mint
        metadata_uri: Metadata reference for the asset (e.g. ipfs://...)
        minimum_price: Floor price in base currency units
        signature: 65-byte r || s || v over the typed-data digest
    """
    asset_id: int
    metadata_uri: str
    minimum_price: int
    signature: bytes = b""

    def __post_init__(self):
        if not 0 <= self.asset_id <= UINT256_MAX:
            raise ValueError(f"asset_id out of range: {self.asset_id}")
        if not 0 <= self.minimum_price <= UINT256_MAX:
            raise ValueError(f"minimum_price out of range: {self.minimum_price}")
        if not isinstance(self.metadata_uri, str):
            raise ValueError("metadata_uri must be a string")

    def struct_hash(self) -> bytes:
        return keccak256(
            VOUCHER_TYPEHASH
            + encode_uint256(self.asset_id)
            + keccak256(self.metadata_uri.encode("utf-8"))
            + encode_uint256(self.minimum_price)
        )

    def digest(self, domain: VoucherDomain) -> bytes:
        """The exact 32 bytes the issuer signs."""
        return keccak256(b"\x19\x01" + domain.separator() + self.struct_hash())

    def to_dict(self) -> dict:
        return {
            "asset_id": self.asset_id,
            "metadata_uri": self.metadata_uri,
            "minimum_price": self.minimum_price,
            "signature": bytes_to_hex(self.signature),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Voucher":
        return cls(
            asset_id=int(data["asset_id"]),
            metadata_uri=data["metadata_uri"],
            minimum_price=int(data["minimum_price"]),
            signature=hex_to_bytes(data.get("signature", "")),
        )


def sign_voucher(
    asset_id: int,
    metadata_uri: str,
    minimum_price: int,
    private_key: bytes,
    domain: VoucherDomain,
) -> Voucher:
    """
    Create a voucher signed by the holder of private_key.

    This is the issuer's side of the protocol; the engine only verifies.
    """
    unsigned = Voucher(asset_id=asset_id, metadata_uri=metadata_uri, minimum_price=minimum_price)
    signature = sign_recoverable(unsigned.digest(domain), private_key)
    return Voucher(
        asset_id=asset_id,
        metadata_uri=metadata_uri,
        minimum_price=minimum_price,
        signature=signature,
    )


# =============================================================================
# Verifier
# =============================================================================


class VoucherVerifier:
    """
    Checks that a voucher was signed by the authorized issuer.

    Stateless: the same voucher always yields the same answer.
    """

    def __init__(
        self,
        issuer: str,
        domain: VoucherDomain,
        recover: Recoverer = recover_address,
    ):
        self.issuer = normalize_address(issuer)
        self.domain = domain
        self._recover = recover

    def recover_signer(self, voucher: Voucher) -> Optional[str]:
        """Recover the signer address, or None if the signature is malformed."""
        if not isinstance(voucher.signature, (bytes, bytearray)):
            return None
        signer = self._recover(voucher.digest(self.domain), bytes(voucher.signature))
        return signer.lower() if signer else None

    def verify(self, voucher: Voucher) -> str:
        """
        Verify a voucher and return the signer identity.

        Raises:
            InvalidSignature: if the signature is malformed or was not made
                by the configured issuer
        """
        signer = self.recover_signer(voucher)
        if signer is None:
            logger.debug(f"Malformed signature on voucher for asset {voucher.asset_id}")
            raise InvalidSignature("Malformed voucher signature")
        if signer != self.issuer:
            logger.debug(f"Voucher for asset {voucher.asset_id} signed by {signer}, expected {self.issuer}")
            raise InvalidSignature(f"Voucher signed by {signer}, not the issuer")
        return signer
