"""
Proxy bidding arithmetic.

Pure functions only: the bid service feeds these the numbers it read under
lock and persists whatever they decide.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from django.conf import settings

# (max_price, increment); None means no upper bound
DEFAULT_BID_INCREMENTS = [
    (Decimal('24.99'), Decimal('1.00')),
    (Decimal('99.99'), Decimal('2.00')),
    (Decimal('249.99'), Decimal('5.00')),
    (Decimal('499.99'), Decimal('10.00')),
    (Decimal('999.99'), Decimal('25.00')),
    (None, Decimal('50.00')),
]
DEFAULT_ANTI_SNIPE_WINDOW_MINUTES = 2

# Resolution cases
FIRST_BID = 'first_bid'
OUTBID_LEADER = 'outbid_leader'
TIED_LEADER = 'tied_leader'
BELOW_LEADER = 'below_leader'


@dataclass(frozen=True)
class ProxyResolution:
    case: str
    visible_price: Decimal
    challenger_wins: bool


def get_bid_increment(price):
    """Step between bids at the given price, larger for pricier cards."""
    bands = getattr(settings, 'BID_INCREMENTS', DEFAULT_BID_INCREMENTS)
    for max_price, increment in bands:
        if max_price is None or price <= max_price:
            return increment
    return bands[-1][1]


def get_minimum_bid(bid_count, current_bid, starting_price=None):
    if bid_count == 0:
        return starting_price if starting_price is not None else current_bid
    return current_bid + get_bid_increment(current_bid)


def resolve_proxy(challenger_max, leader_max=None, starting_price=None) -> ProxyResolution:
    """
    Decide the new visible price and who leads after a challenger bids.

    Args:
        challenger_max: The incoming bidder's ceiling
        leader_max: Ceiling of the current leader, None if nobody has bid
        starting_price: Listing floor, used for the opening bid

    Ties go to the leader because they reached that ceiling first.
    """
    if leader_max is None:
        price = starting_price if starting_price is not None else challenger_max
        return ProxyResolution(FIRST_BID, price, True)

    if challenger_max > leader_max:
        price = min(leader_max + get_bid_increment(leader_max), challenger_max)
        return ProxyResolution(OUTBID_LEADER, price, True)

    if challenger_max == leader_max:
        return ProxyResolution(TIED_LEADER, challenger_max, False)

    price = min(challenger_max + get_bid_increment(challenger_max), leader_max)
    return ProxyResolution(BELOW_LEADER, price, False)


def extended_auction_end(auction_end, now, extension_minutes, auto_extend=True) -> Optional[datetime]:
    """
    New auction end if a bid accepted at `now` lands in the anti-snipe window.

    Returns None when the auction should keep its current end.
    """
    if not auto_extend or auction_end is None:
        return None

    window = timedelta(minutes=getattr(settings, 'ANTI_SNIPE_WINDOW_MINUTES', DEFAULT_ANTI_SNIPE_WINDOW_MINUTES))
    remaining = auction_end - now
    if timedelta(0) < remaining <= window:
        return auction_end + timedelta(minutes=extension_minutes)
    return None
