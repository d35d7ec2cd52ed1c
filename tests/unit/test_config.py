"""Unit tests for auction configuration loading."""

import json

import pytest
from pydantic import ValidationError

from lazyauction.core import AuctionConfig, load_config
from lazyauction.core.voucher import DEFAULT_SIGNING_DOMAIN

ISSUER = "0x" + "1A" * 20


class TestAuctionConfig:

    def test_defaults(self):
        config = AuctionConfig(issuer=ISSUER)
        assert config.issuer == ISSUER.lower()
        assert config.bidding_time == 120
        assert config.signing_domain == DEFAULT_SIGNING_DOMAIN

    def test_invalid_issuer(self):
        with pytest.raises(ValidationError):
            AuctionConfig(issuer="nobody")

    def test_negative_bidding_time(self):
        with pytest.raises(ValidationError):
            AuctionConfig(issuer=ISSUER, bidding_time=-1)

    def test_domain(self):
        config = AuctionConfig(issuer=ISSUER, contract_address="0x" + "22" * 20, chain_id=5)
        domain = config.domain()
        assert domain.verifying_contract == "0x" + "22" * 20
        assert domain.chain_id == 5


class TestLoadConfig:

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "auction.json"
        path.write_text(json.dumps({"issuer": ISSUER, "bidding_time": 60, "chain_id": 1}))
        config = load_config(str(path))
        assert config.bidding_time == 60
        assert config.chain_id == 1

    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LAZYAUCTION_ISSUER", ISSUER)
        monkeypatch.setenv("LAZYAUCTION_BIDDING_TIME", "300")
        config = load_config()
        assert config.issuer == ISSUER.lower()
        assert config.bidding_time == 300

    def test_overrides_win(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LAZYAUCTION_ISSUER", ISSUER)
        config = load_config(bidding_time=7)
        assert config.bidding_time == 7
