"""
Logging for BlindBid.

Everything logs under the "blindbid" namespace, one child logger per
subsystem: auction (bids, reveals, withdrawals, settlement), payments
(custody transfers), clock, deployment and cli. Console output is colored
by level; the CLI's --debug flag drops the level to DEBUG so individual
bids and clock moves become visible.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog

ROOT_LOGGER = "blindbid"
LOG_FILE = "blindbid.log"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


class BlindBidLogger:
    """
    Owns the handlers on the "blindbid" logger.

    Subsystem loggers obtained before setup() trigger a default INFO setup,
    so library users get colored output without configuring anything. The
    CLI calls setup_logging() once per invocation with the configured level.
    """

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
    ):
        """
        Attach the console handler, and a file handler if requested.

        Args:
            level: Level for the blindbid namespace and its handlers
            log_dir: Where blindbid.log goes (default ./logs)
            log_to_file: Also keep an uncolored audit log of auction activity
        """
        if cls._initialized:
            return

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger(ROOT_LOGGER)
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        # stderr keeps CLI stdout (commitments, JSON records) clean
        console_handler = colorlog.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s",
            datefmt=DATE_FORMAT,
            log_colors=LEVEL_COLORS,
        ))
        root_logger.addHandler(console_handler)

        if log_to_file and cls._log_dir:
            file_handler = logging.FileHandler(cls._log_dir / LOG_FILE)
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def reset(cls):
        """Close and detach blindbid handlers so setup() can run again."""
        root_logger = logging.getLogger(ROOT_LOGGER)
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)
        cls._initialized = False
        cls._log_dir = None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Logger for one subsystem, e.g. "auction" -> blindbid.auction."""
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_logger(name: str) -> logging.Logger:
    return BlindBidLogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """(Re)configure blindbid logging, discarding any earlier handlers."""
    BlindBidLogger.reset()
    BlindBidLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
