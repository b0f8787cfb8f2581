"""
Unit tests for auction deployment records.
"""

import json

import pytest
from pydantic import ValidationError

from blindbid.crypto import is_valid_address
from blindbid.core.auction import BlindAuction
from blindbid.core.clock import ManualClock
from blindbid.core.config import AuctionConfig
from blindbid.core.deployment import (
    DeploymentRecord,
    deploy_auction,
    save_deployment,
    load_deployment,
    derive_auction_address,
    AUCTION_INTERFACE,
    ADDRESS_FILE,
    RECORD_FILE,
)

BENEFICIARY = "0x" + "ab" * 20


@pytest.fixture
def config(tmp_path):
    return AuctionConfig(
        bidding_duration=30,
        reveal_duration=45,
        beneficiary=BENEFICIARY,
        deployments_dir=tmp_path / "deployments",
    )


@pytest.fixture
def deployment(config):
    return deploy_auction(config, clock=ManualClock(start=5000))


class TestDeploy:
    
    def test_creates_auction(self, deployment):
        auction = deployment.auction
        assert isinstance(auction, BlindAuction)
        assert auction.bidding_end == 5030
        assert auction.reveal_end == 5075
        assert auction.beneficiary == bytes.fromhex("ab" * 20)
    
    def test_record_matches_auction(self, deployment):
        record = deployment.record
        assert record.beneficiary == BENEFICIARY
        assert record.bidding_duration == 30
        assert record.reveal_duration == 45
        assert record.bidding_end == 5030
        assert record.reveal_end == 5075
        assert record.deployed_at == 5000
        assert record.interface == AUCTION_INTERFACE
        assert is_valid_address(record.address)
    
    def test_addresses_are_unique(self, config):
        clock = ManualClock(start=5000)
        first = deploy_auction(config, clock=clock).record.address
        second = deploy_auction(config, clock=clock).record.address
        assert first != second
    
    def test_requires_beneficiary(self):
        with pytest.raises(ValueError):
            deploy_auction(AuctionConfig())
    
    def test_derive_address_deterministic(self):
        beneficiary = b"\x01" * 20
        a = derive_auction_address(beneficiary, 10, b"salt")
        assert a == derive_auction_address(beneficiary, 10, b"salt")
        assert a != derive_auction_address(beneficiary, 11, b"salt")
        assert len(a) == 20


class TestPersistence:
    
    def test_save_writes_both_files(self, deployment, tmp_path):
        record_path = save_deployment(deployment.record, tmp_path / "out")
        
        assert record_path == tmp_path / "out" / RECORD_FILE
        address_data = json.loads((tmp_path / "out" / ADDRESS_FILE).read_text())
        assert address_data == {"Auction": deployment.record.address}
    
    def test_load_saved_record(self, deployment, tmp_path):
        save_deployment(deployment.record, tmp_path)
        assert load_deployment(tmp_path) == deployment.record
    
    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_deployment(tmp_path / "nowhere")
    
    def test_load_corrupt_record(self, deployment, tmp_path):
        data = deployment.record.model_dump()
        data["address"] = "0x1234"
        (tmp_path / RECORD_FILE).write_text(json.dumps(data))
        
        with pytest.raises(ValidationError):
            load_deployment(tmp_path)
    
    def test_record_rejects_negative_duration(self, deployment):
        data = deployment.record.model_dump()
        data["reveal_duration"] = -1
        with pytest.raises(ValidationError):
            DeploymentRecord(**data)
