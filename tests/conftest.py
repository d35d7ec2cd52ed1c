"""Shared fixtures for auction tests."""

import pytest

from lazyauction.core import (
    AccountBook,
    AssetRegistry,
    LazyMintAuction,
    ManualClock,
    VoucherDomain,
    sign_voucher,
)
from lazyauction.crypto import generate_keypair

CONTRACT = "0x5fbdb2315678afecb367f032d93f642f64180aa3"
CHAIN_ID = 31337
BIDDING_TIME = 120
METADATA_URI = "ipfs://bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi"

BIDDER_1 = "0x" + "b1" * 20
BIDDER_2 = "0x" + "b2" * 20
BIDDER_3 = "0x" + "b3" * 20


@pytest.fixture
def issuer_key():
    return generate_keypair()


@pytest.fixture
def domain():
    return VoucherDomain(verifying_contract=CONTRACT, chain_id=CHAIN_ID)


@pytest.fixture
def voucher(issuer_key, domain):
    return sign_voucher(1, METADATA_URI, 2, issuer_key.private_key, domain)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def registry():
    return AssetRegistry()


@pytest.fixture
def accounts():
    return AccountBook()


@pytest.fixture
def auction(issuer_key, domain, registry, accounts, clock):
    return LazyMintAuction(
        issuer=issuer_key.address,
        bidding_time=BIDDING_TIME,
        domain=domain,
        asset_issuer=registry,
        payouts=accounts,
        clock=clock,
    )
