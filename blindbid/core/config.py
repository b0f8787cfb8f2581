"""
Auction configuration parameters for BlindBid.

Defines phase durations, the beneficiary and operational paths. Values
can come from a .env file or the process environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

from blindbid.utils.validation import require, validate_duration, validate_hex_string

ENV_PREFIX = "BLINDBID_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AuctionConfig:
    """Auction-wide configuration parameters"""

    # Phase durations (seconds)
    bidding_duration: int = 60
    reveal_duration: int = 60

    # Fund recipient (0x-prefixed hex address)
    beneficiary: Optional[str] = None

    # Paths
    deployments_dir: Path = Path("deployments")

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate values"""
        require(validate_duration(self.bidding_duration, "bidding_duration"))
        require(validate_duration(self.reveal_duration, "reveal_duration"))
        if self.beneficiary is not None:
            require(validate_hex_string(self.beneficiary, "beneficiary", 20))
        self.deployments_dir = Path(self.deployments_dir)
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def load_config(env_file: Optional[str] = None) -> AuctionConfig:
    """
    Load configuration from a .env file and the environment.

    Process environment variables take precedence over the file.

    Args:
        env_file: Optional path to a .env file

    Returns:
        AuctionConfig instance
    """
    values = {}
    if env_file:
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    values.update({k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)})

    kwargs = {}
    if f"{ENV_PREFIX}BIDDING_DURATION" in values:
        kwargs["bidding_duration"] = _parse_int(
            values[f"{ENV_PREFIX}BIDDING_DURATION"], "bidding_duration"
        )
    if f"{ENV_PREFIX}REVEAL_DURATION" in values:
        kwargs["reveal_duration"] = _parse_int(
            values[f"{ENV_PREFIX}REVEAL_DURATION"], "reveal_duration"
        )
    if values.get(f"{ENV_PREFIX}BENEFICIARY"):
        kwargs["beneficiary"] = values[f"{ENV_PREFIX}BENEFICIARY"]
    if values.get(f"{ENV_PREFIX}DEPLOYMENTS_DIR"):
        kwargs["deployments_dir"] = Path(values[f"{ENV_PREFIX}DEPLOYMENTS_DIR"])
    if values.get(f"{ENV_PREFIX}LOG_LEVEL"):
        kwargs["log_level"] = values[f"{ENV_PREFIX}LOG_LEVEL"]

    return AuctionConfig(**kwargs)
