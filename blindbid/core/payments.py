"""
Payments - fund custody for the auction engine.

The engine pulls attached deposits in through `receive` and pays out
through `transfer`. `AccountBook` keeps balances in memory so callers
can observe how much each address gained or lost.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List

from blindbid.crypto import bytes_to_hex
from blindbid.utils.logger import get_logger
from blindbid.utils.validation import require, validate_address, validate_amount

logger = get_logger("payments")


class InsufficientFunds(ValueError):
    """Sender cannot cover the attached amount."""

    def __init__(self, address: bytes, available: int, required: int):
        super().__init__(
            f"Insufficient balance for {bytes_to_hex(address)}: "
            f"have {available}, need {required}"
        )
        self.address = address
        self.available = available
        self.required = required


@dataclass(frozen=True)
class Transfer:
    """A single movement of funds. Empty sender/recipient means custody."""
    sender: bytes
    recipient: bytes
    amount: int


class PaymentSink:
    """Moves funds between callers and the engine's custody."""

    def receive(self, sender: bytes, amount: int) -> None:
        """Take `amount` from `sender` into custody."""
        raise NotImplementedError

    def transfer(self, recipient: bytes, amount: int) -> None:
        """Pay `amount` out of custody to `recipient`."""
        raise NotImplementedError


class AccountBook(PaymentSink):
    """
    In-memory balances.
    
    Attributes:
        balances: address -> spendable balance
        history: every receive/transfer in call order
    """

    def __init__(self):
        self.balances: Dict[bytes, int] = defaultdict(int)
        self.history: List[Transfer] = []

    def fund(self, address: bytes, amount: int) -> None:
        """Credit an address out of thin air (genesis-style)."""
        require(validate_address(address))
        require(validate_amount(amount))
        self.balances[address] += amount

    def balance_of(self, address: bytes) -> int:
        return self.balances.get(address, 0)

    def receive(self, sender: bytes, amount: int) -> None:
        available = self.balance_of(sender)
        if amount > available:
            raise InsufficientFunds(sender, available, amount)
        self.balances[sender] = available - amount
        self.history.append(Transfer(sender=sender, recipient=b"", amount=amount))
        logger.debug(f"Received {amount} from {bytes_to_hex(sender)[:10]}...")

    def transfer(self, recipient: bytes, amount: int) -> None:
        self.balances[recipient] += amount
        self.history.append(Transfer(sender=b"", recipient=recipient, amount=amount))
        logger.debug(f"Paid {amount} to {bytes_to_hex(recipient)[:10]}...")

    def total_paid_to(self, address: bytes) -> int:
        """Sum of all transfers out of custody to `address`."""
        return sum(t.amount for t in self.history if t.recipient == address)
