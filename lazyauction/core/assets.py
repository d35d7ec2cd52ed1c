"""
Asset issuance collaborator.

The auction engine only needs `create` and `transfer`. AssetRegistry is an
in-memory, ERC-721 style implementation used by tests and the simulator.
"""

from typing import Dict, Optional, Protocol

from lazyauction.crypto import normalize_address
from lazyauction.utils.logger import get_logger

logger = get_logger("assets")


class AssetIssuer(Protocol):
    def create(self, owner: str, asset_id: int, metadata_uri: str) -> None:
        ...

    def transfer(self, from_address: str, to_address: str, asset_id: int) -> None:
        ...

    def owner_of(self, asset_id: int) -> Optional[str]:
        ...


class AssetError(Exception):
    """Raised for invalid mint or transfer requests."""


class AssetRegistry:
    """
    Ownership ledger for non-fungible assets.

    Attributes:
        owners: asset_id -> owner address
        metadata: asset_id -> metadata URI
    """

    def __init__(self):
        self.owners: Dict[int, str] = {}
        self.metadata: Dict[int, str] = {}

    def create(self, owner: str, asset_id: int, metadata_uri: str) -> None:
        if asset_id in self.owners:
            raise AssetError(f"Asset {asset_id} already minted")
        self.owners[asset_id] = normalize_address(owner)
        self.metadata[asset_id] = metadata_uri
        logger.info(f"Minted asset {asset_id} to {owner}")

    def transfer(self, from_address: str, to_address: str, asset_id: int) -> None:
        current = self.owners.get(asset_id)
        if current is None:
            raise AssetError(f"Asset {asset_id} does not exist")
        if current != normalize_address(from_address):
            raise AssetError(f"Asset {asset_id} is not owned by {from_address}")
        self.owners[asset_id] = normalize_address(to_address)
        logger.info(f"Transferred asset {asset_id}: {from_address} -> {to_address}")

    def owner_of(self, asset_id: int) -> Optional[str]:
        return self.owners.get(asset_id)

    def token_uri(self, asset_id: int) -> Optional[str]:
        return self.metadata.get(asset_id)
