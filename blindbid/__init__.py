"""
BlindBid

A sealed-bid ("blind") auction engine:
- Hash commitments to hidden bids during the bidding window
- Reveal phase with deposit refunds and highest-bid tracking
- Pull-payment withdrawals for outbid and overpaying bidders
- One-shot settlement paying the beneficiary
"""

__version__ = "0.1.0"
