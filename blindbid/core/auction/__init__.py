"""
BlindBid Auction Module.

This module provides the sealed-bid auction:
- Bid blinding (commitments)
- Bidding and reveal phases
- Highest-bid tracking with pending returns
- Settlement to the beneficiary
"""

from blindbid.core.auction.errors import (
    AuctionError,
    TooEarly,
    TooLate,
    AuctionEndAlreadyCalled,
)

from blindbid.core.auction.blind_auction import (
    BlindAuction,
    Bid,
    AuctionEnded,
    AuctionPhase,
)

__all__ = [
    # Errors
    "AuctionError",
    "TooEarly",
    "TooLate",
    "AuctionEndAlreadyCalled",
    # Auction
    "BlindAuction",
    "Bid",
    "AuctionEnded",
    "AuctionPhase",
]
