"""
Blind Auction - Sealed-bid auction with deposits and pull-payment refunds.

This module implements a two-phase auction mechanism:
1. Bidding Phase: Bidders submit blinded bids (hash commitments) with a deposit
2. Reveal Phase: Bidders reveal (value, fake) for each of their bids

Deposits hide the true bid: a bidder may deposit more than the value, and may
place decoy ("fake") bids. On reveal, correctly revealed bids are refunded their
deposit minus whatever is used to back the current highest bid. Outbid bidders
are credited through pending returns and collect with withdraw().

Phases are derived from the clock and never stored:

    BIDDING      now < bidding_end
    REVEAL       bidding_end <= now < reveal_end
    POST_REVEAL  now >= reveal_end, auction_end() not yet called
    ENDED        auction_end() succeeded
"""

import threading
from collections import defaultdict
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Sequence

from blindbid.crypto import EMPTY_COMMITMENT, blind, bytes_to_hex
from blindbid.core.auction.errors import AuctionEndAlreadyCalled, TooEarly, TooLate
from blindbid.core.clock import Clock, SystemClock
from blindbid.core.payments import AccountBook, PaymentSink
from blindbid.utils.logger import get_logger
from blindbid.utils.validation import (
    require,
    validate_address,
    validate_amount,
    validate_commitment,
    validate_duration,
    validate_reveal_data,
)

logger = get_logger("auction")


# =============================================================================
# Enums
# =============================================================================


class AuctionPhase(IntEnum):
    """Phase of a blind auction, computed from the clock."""
    BIDDING = 0
    REVEAL = 1
    POST_REVEAL = 2
    ENDED = 3


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class Bid:
    """
    A placed bid.

    `blinded_bid` is overwritten with EMPTY_COMMITMENT once revealed.
    `deposit` never changes.
    """
    blinded_bid: bytes
    deposit: int

    @property
    def revealed(self) -> bool:
        return self.blinded_bid == EMPTY_COMMITMENT


@dataclass(frozen=True)
class AuctionEnded:
    """Emitted once by auction_end()."""
    winner: Optional[bytes]
    amount: int


# =============================================================================
# Blind Auction
# =============================================================================


class BlindAuction:
    """
    A single blind auction.

    Every public operation runs under one reentrant lock and either completes
    or leaves state untouched. Payments to untrusted parties go through
    pending returns; only the fixed beneficiary is paid directly.

    Attributes:
        bidding_end: Timestamp at which bidding closes
        reveal_end: Timestamp at which revealing closes
        beneficiary: Address receiving the winning bid
        highest_bid: Current highest revealed bid
        highest_bidder: Address of the highest revealed bid, if any
        ended: Whether auction_end() has run
        balance: Funds held in custody
    """

    def __init__(
        self,
        bidding_duration: int,
        reveal_duration: int,
        beneficiary: bytes,
        clock: Optional[Clock] = None,
        payments: Optional[PaymentSink] = None,
    ):
        """
        Args:
            bidding_duration: Seconds from now until bidding closes
            reveal_duration: Seconds from bidding close until revealing closes
            beneficiary: 20-byte address receiving the winning bid
            clock: Timestamp source (default: wall clock)
            payments: Fund custody (default: fresh AccountBook)
        """
        require(validate_duration(bidding_duration, "bidding_duration"))
        require(validate_duration(reveal_duration, "reveal_duration"))
        require(validate_address(beneficiary, "beneficiary"))

        self.clock = clock or SystemClock()
        self.payments = payments if payments is not None else AccountBook()

        self.beneficiary = bytes(beneficiary)
        self.bidding_end = self.clock.now() + bidding_duration
        self.reveal_end = self.bidding_end + reveal_duration

        self.ended = False
        self.highest_bid = 0
        self.highest_bidder: Optional[bytes] = None

        self._bids: Dict[bytes, List[Bid]] = defaultdict(list)
        self._pending_returns: Dict[bytes, int] = defaultdict(int)
        self.balance = 0

        self.events: List[AuctionEnded] = []
        self._listeners: List[Callable[[AuctionEnded], None]] = []
        self._lock = threading.RLock()

        logger.info(f"Auction created for beneficiary {bytes_to_hex(self.beneficiary)[:10]}..., "
                    f"bidding until {self.bidding_end}, reveal until {self.reveal_end}")

    # =========================================================================
    # Phase
    # =========================================================================

    def phase_at(self, timestamp: int) -> AuctionPhase:
        """Phase the auction is in at `timestamp`."""
        if self.ended:
            return AuctionPhase.ENDED
        if timestamp < self.bidding_end:
            return AuctionPhase.BIDDING
        if timestamp < self.reveal_end:
            return AuctionPhase.REVEAL
        return AuctionPhase.POST_REVEAL

    @property
    def phase(self) -> AuctionPhase:
        return self.phase_at(self.clock.now())

    def _only_before(self, time: int) -> None:
        if self.clock.now() >= time:
            raise TooLate(time)

    def _only_after(self, time: int) -> None:
        if self.clock.now() < time:
            raise TooEarly(time)

    # =========================================================================
    # Commitments
    # =========================================================================

    @staticmethod
    def blind(value: int, fake: bool) -> bytes:
        """Commitment for a bid of `value` with the given fake flag."""
        return blind(value, fake)

    # =========================================================================
    # Bidding Phase
    # =========================================================================

    def place_bid(self, sender: bytes, value: int, blinded_bid: bytes) -> None:
        """
        Place a blinded bid with `value` attached as deposit.

        The deposit is only refunded if the bid is correctly revealed. A bid
        is valid when its deposit is at least the revealed value and it is
        not fake. Bidders may place several bids to obscure the real one.

        Raises:
            TooLate: bidding has closed
            ValueError: malformed input
        """
        require(validate_address(sender, "sender"))
        require(validate_amount(value, "value"))
        require(validate_commitment(blinded_bid))

        sender = bytes(sender)

        with self._lock:
            self._only_before(self.bidding_end)

            self.payments.receive(sender, value)
            self.balance += value
            self._bids[sender].append(Bid(blinded_bid=bytes(blinded_bid), deposit=value))

            logger.debug(f"Bid #{len(self._bids[sender]) - 1} from {bytes_to_hex(sender)[:10]}..., "
                         f"deposit={value}")

    # =========================================================================
    # Reveal Phase
    # =========================================================================

    def reveal(self, sender: bytes, values: Sequence[int], fakes: Sequence[bool]) -> int:
        """
        Reveal blinded bids.

        values[i] and fakes[i] describe the sender's i-th bid. Only
        min(len(values), len(fakes), bid count) leading bids are checked;
        extra entries are ignored and never validated. A bid whose reveal
        does not match its commitment is skipped and nothing is refunded
        for it.

        Returns:
            Total amount credited to the sender's pending returns

        Raises:
            TooEarly: bidding has not closed yet
            TooLate: revealing has closed
            ValueError: malformed input
        """
        require(validate_address(sender, "sender"))
        require(validate_reveal_data(values, fakes, count=0))

        with self._lock:
            self._only_after(self.bidding_end)
            self._only_before(self.reveal_end)

            bids = self._bids.get(bytes(sender), [])
            length = min(len(bids), len(values), len(fakes))
            require(validate_reveal_data(values, fakes, count=length))

            total_refund = 0
            for i in range(length):
                bid_to_check = bids[i]
                value, fake = values[i], fakes[i]

                if bid_to_check.blinded_bid != blind(value, fake):
                    # Bid was not actually revealed; do not refund the deposit
                    logger.warning(f"Reveal mismatch for {bytes_to_hex(sender)[:10]}... bid #{i}")
                    continue

                refund = bid_to_check.deposit
                if not fake and bid_to_check.deposit >= value:
                    if self._place_bid(sender, value):
                        refund -= value

                # Make it impossible for the sender to re-claim the same deposit
                bid_to_check.blinded_bid = EMPTY_COMMITMENT
                total_refund += refund

            if total_refund:
                self._pending_returns[bytes(sender)] += total_refund

            logger.info(f"Reveal from {bytes_to_hex(sender)[:10]}...: {length} bid(s) checked, "
                        f"refund={total_refund}")
            return total_refund

    def _place_bid(self, bidder: bytes, value: int) -> bool:
        """
        Record a revealed bid if it beats the current highest.

        Ties keep the incumbent. The previous highest bidder is credited
        through pending returns rather than paid directly.
        """
        if value <= self.highest_bid:
            return False

        if self.highest_bidder is not None:
            self._pending_returns[self.highest_bidder] += self.highest_bid

        self.highest_bid = value
        self.highest_bidder = bytes(bidder)
        logger.debug(f"New highest bid {value} from {bytes_to_hex(bidder)[:10]}...")
        return True

    # =========================================================================
    # Withdrawals
    # =========================================================================

    def withdraw(self, sender: bytes) -> int:
        """
        Withdraw everything owed to `sender`.

        The pending amount is zeroed before paying so a reentrant call made
        by the payment sink sees nothing left to withdraw.

        Returns:
            Amount paid (0 if nothing was owed)
        """
        require(validate_address(sender, "sender"))

        with self._lock:
            sender = bytes(sender)
            amount = self._pending_returns.get(sender, 0)
            if amount == 0:
                return 0

            self._pending_returns[sender] = 0
            self.balance -= amount
            try:
                self.payments.transfer(sender, amount)
            except Exception:
                self._pending_returns[sender] += amount
                self.balance += amount
                raise

            logger.info(f"Withdrawal of {amount} to {bytes_to_hex(sender)[:10]}...")
            return amount

    # =========================================================================
    # Finalization
    # =========================================================================

    def auction_end(self) -> AuctionEnded:
        """
        End the auction and send the highest bid to the beneficiary.

        Returns:
            The AuctionEnded event

        Raises:
            TooEarly: revealing has not closed yet
            AuctionEndAlreadyCalled: the auction was already ended
        """
        with self._lock:
            self._only_after(self.reveal_end)
            if self.ended:
                raise AuctionEndAlreadyCalled()

            event = AuctionEnded(winner=self.highest_bidder, amount=self.highest_bid)

            self.ended = True
            self.balance -= self.highest_bid
            try:
                self.payments.transfer(self.beneficiary, self.highest_bid)
            except Exception:
                self.ended = False
                self.balance += self.highest_bid
                raise

            self.events.append(event)
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception as e:
                    logger.error(f"AuctionEnded listener {listener!r} failed: {e}")

            winner = bytes_to_hex(event.winner) if event.winner else "none"
            logger.info(f"Auction ended: winner={winner}, amount={event.amount}")
            return event

    def subscribe(self, listener: Callable[[AuctionEnded], None]) -> None:
        """
        Call `listener` with every AuctionEnded event.

        Listeners run after the auction has ended and paid out; an exception
        raised by one is logged and does not stop the others.
        """
        self._listeners.append(listener)

    # =========================================================================
    # Queries
    # =========================================================================

    def bids(self, address: bytes, index: int) -> Bid:
        """The `index`-th bid of `address`. Raises IndexError if absent."""
        bids = self._bids.get(bytes(address), [])
        if index < 0 or index >= len(bids):
            raise IndexError(f"No bid #{index} for {bytes_to_hex(address)}")
        return bids[index]

    def bid_count(self, address: bytes) -> int:
        return len(self._bids.get(bytes(address), []))

    def pending_return(self, address: bytes) -> int:
        """Amount `address` can currently withdraw."""
        return self._pending_returns.get(bytes(address), 0)

    def total_pending_returns(self) -> int:
        return sum(self._pending_returns.values())

    def bidders(self) -> List[bytes]:
        """Addresses that placed at least one bid, in first-bid order."""
        return [address for address, bids in self._bids.items() if bids]

    def stats(self) -> dict:
        """Get auction statistics."""
        return {
            "phase": self.phase.name,
            "bidders": len(self.bidders()),
            "bids": sum(len(bids) for bids in self._bids.values()),
            "unrevealed_bids": sum(
                1 for bids in self._bids.values() for bid in bids if not bid.revealed
            ),
            "highest_bid": self.highest_bid,
            "pending_returns": self.total_pending_returns(),
            "balance": self.balance,
        }


__all__ = [
    "BlindAuction",
    "Bid",
    "AuctionEnded",
    "AuctionPhase",
]
