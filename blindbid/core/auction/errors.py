"""
Auction errors.

Every error leaves the auction exactly as it was before the failing call.
"""


class AuctionError(Exception):
    """Base class for auction phase errors."""


class TooEarly(AuctionError):
    """Operation attempted before its phase starts. `time` is the start."""

    def __init__(self, time: int):
        super().__init__(f"Too early: allowed from {time}")
        self.time = time


class TooLate(AuctionError):
    """Operation attempted after its phase ended. `time` is the end."""

    def __init__(self, time: int):
        super().__init__(f"Too late: allowed before {time}")
        self.time = time


class AuctionEndAlreadyCalled(AuctionError):
    """auction_end() was already executed."""

    def __init__(self):
        super().__init__("The function auction_end has already been called")
