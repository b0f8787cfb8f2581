"""
Deployment - construct an auction from configuration and record it.

A deployment record describes where an auction lives and which
operations it exposes, so other tooling can refer to it later.
Records are written as two JSON files:

    Auction-address.json   {"Auction": "0x..."}
    Auction.json           the full record
"""

import json
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from blindbid.crypto import bytes_to_hex, hex_to_bytes, is_valid_address, keccak256
from blindbid.core.auction import BlindAuction
from blindbid.core.clock import Clock
from blindbid.core.config import AuctionConfig
from blindbid.core.payments import PaymentSink
from blindbid.utils.logger import get_logger

logger = get_logger("deployment")

ADDRESS_FILE = "Auction-address.json"
RECORD_FILE = "Auction.json"

AUCTION_INTERFACE = [
    "blind",
    "place_bid",
    "reveal",
    "withdraw",
    "auction_end",
    "bidding_end",
    "reveal_end",
    "beneficiary",
    "highest_bid",
    "highest_bidder",
    "bids",
]


class DeploymentRecord(BaseModel):
    """Persisted description of a deployed auction."""

    address: str
    beneficiary: str
    bidding_duration: int = Field(ge=0)
    reveal_duration: int = Field(ge=0)
    bidding_end: int = Field(ge=0)
    reveal_end: int = Field(ge=0)
    deployed_at: int = Field(ge=0)
    interface: List[str] = Field(default_factory=lambda: list(AUCTION_INTERFACE))

    @field_validator("address", "beneficiary")
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not is_valid_address(value):
            raise ValueError(f"Invalid address: {value}")
        return value.lower()


@dataclass
class Deployment:
    """A live auction and its record."""
    auction: BlindAuction
    record: DeploymentRecord


def derive_auction_address(beneficiary: bytes, deployed_at: int, salt: bytes) -> bytes:
    """Address = last 20 bytes of keccak256(beneficiary || deployed_at || salt)."""
    return keccak256(beneficiary + deployed_at.to_bytes(8, "big") + salt)[-20:]


def deploy_auction(
    config: AuctionConfig,
    clock: Optional[Clock] = None,
    payments: Optional[PaymentSink] = None,
) -> Deployment:
    """
    Construct an auction from configuration.

    Args:
        config: Durations and beneficiary (beneficiary is required)
        clock: Timestamp source for the auction
        payments: Fund custody for the auction

    Returns:
        Deployment with the auction and its record
    """
    if config.beneficiary is None:
        raise ValueError("A beneficiary address is required to deploy an auction")

    beneficiary = hex_to_bytes(config.beneficiary)
    auction = BlindAuction(
        bidding_duration=config.bidding_duration,
        reveal_duration=config.reveal_duration,
        beneficiary=beneficiary,
        clock=clock,
        payments=payments,
    )

    deployed_at = auction.bidding_end - config.bidding_duration
    address = derive_auction_address(beneficiary, deployed_at, secrets.token_bytes(16))

    record = DeploymentRecord(
        address=bytes_to_hex(address),
        beneficiary=bytes_to_hex(beneficiary),
        bidding_duration=config.bidding_duration,
        reveal_duration=config.reveal_duration,
        bidding_end=auction.bidding_end,
        reveal_end=auction.reveal_end,
        deployed_at=deployed_at,
    )

    logger.info(f"Auction deployed to: {record.address}")
    return Deployment(auction=auction, record=record)


def save_deployment(record: DeploymentRecord, directory: Union[str, Path]) -> Path:
    """
    Write the address file and the full record to `directory`.

    Returns:
        Path of the full record file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    (directory / ADDRESS_FILE).write_text(
        json.dumps({"Auction": record.address}, indent=2)
    )
    record_path = directory / RECORD_FILE
    record_path.write_text(record.model_dump_json(indent=2))

    logger.debug(f"Deployment record saved to {record_path}")
    return record_path


def load_deployment(directory: Union[str, Path]) -> DeploymentRecord:
    """Read a deployment record written by save_deployment()."""
    record_path = Path(directory) / RECORD_FILE
    if not record_path.exists():
        raise FileNotFoundError(f"No deployment record at {record_path}")
    return DeploymentRecord.model_validate_json(record_path.read_text())
