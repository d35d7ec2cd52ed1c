"""
Auction configuration for LazyAuction.

Values come from a JSON file, or from LAZYAUCTION_* environment variables
(a local .env file is loaded first).
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from lazyauction.core.voucher import (
    DEFAULT_SIGNATURE_VERSION,
    DEFAULT_SIGNING_DOMAIN,
    VoucherDomain,
)
from lazyauction.crypto import normalize_address

ENV_PREFIX = "LAZYAUCTION_"


class AuctionConfig(BaseModel):
    """Construction-time parameters of one auction instance"""

    issuer: str
    bidding_time: int = Field(default=120, ge=0)  # Seconds from construction to deadline

    # Voucher domain
    contract_address: str = "0x" + "00" * 19 + "01"
    chain_id: int = Field(default=31337, ge=0)
    signing_domain: str = DEFAULT_SIGNING_DOMAIN
    signature_version: str = DEFAULT_SIGNATURE_VERSION

    @field_validator("issuer", "contract_address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        return normalize_address(value)

    def domain(self) -> VoucherDomain:
        return VoucherDomain(
            verifying_contract=self.contract_address,
            chain_id=self.chain_id,
            name=self.signing_domain,
            version=self.signature_version,
        )


def load_config(config_path: Optional[str] = None, **overrides) -> AuctionConfig:
    """
    Load configuration from file or environment.

    Args:
        config_path: Optional path to a JSON config file
        overrides: Values that take precedence over both sources

    Returns:
        AuctionConfig instance
    """
    if config_path:
        data = json.loads(Path(config_path).read_text())
    else:
        load_dotenv(find_dotenv(usecwd=True))
        data = {
            key[len(ENV_PREFIX):].lower(): value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    data.update({k: v for k, v in overrides.items() if v is not None})
    return AuctionConfig(**data)
