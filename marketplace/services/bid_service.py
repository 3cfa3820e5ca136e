"""
Proxy bidding (max bid) engine.

Every bid is a max bid (eBay model). The bidder's ceiling stays private and
the visible price only climbs as far as it takes to beat the runner-up's
ceiling by one increment. Ties go to whoever reached the ceiling first.

Each attempt runs in one transaction with the listing row locked. The
listing write is also a compare-and-swap on bid_count, so a stale read on a
backend that ignores SELECT ... FOR UPDATE is retried instead of
overwriting a concurrent bid.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from gamification.services import XpService
from marketplace.models import Listing, Bid
from .proxy import (
    FIRST_BID, OUTBID_LEADER, TIED_LEADER,
    extended_auction_end, get_minimum_bid, resolve_proxy,
)

logger = logging.getLogger('marketplace')

DEFAULT_MAX_ATTEMPTS = 3
CENT = Decimal('0.01')
# Bid.amount is DECIMAL(10, 2)
MAX_BID_AMOUNT = Decimal('99999999.99')


class BidRejection:
    """Reasons a bid can be turned down. Nothing is written for any of these."""
    INVALID_INPUT = 'invalid_input'
    NOT_FOUND = 'not_found'
    LISTING_NOT_ACTIVE = 'listing_not_active'
    NOT_BIDDABLE = 'not_biddable'
    AUCTION_ENDED = 'auction_ended'
    AUCTION_NOT_STARTED = 'auction_not_started'
    SELF_BID_FORBIDDEN = 'self_bid_forbidden'
    BID_TOO_LOW = 'bid_too_low'
    MAX_BID_NOT_INCREASED = 'max_bid_not_increased'


class BidConflict(Exception):
    """The listing or its leading bid changed between the read and the write."""


@dataclass
class BidResult:
    success: bool
    message: str
    reason: Optional[str] = None
    minimum_bid: Optional[Decimal] = None
    current_bid: Decimal = Decimal('0')
    bid_count: int = 0
    is_winning: bool = False
    your_max_bid: Optional[Decimal] = None
    auction_end: Optional[datetime] = None
    bid: Optional[Bid] = None
    # Whether the XP/tier step landed; independent of `success`
    xp_awarded: bool = False

    @classmethod
    def rejected(cls, reason, message, **kwargs):
        return cls(success=False, message=message, reason=reason, **kwargs)


class BidService:

    @staticmethod
    def place_bid(listing_id, bidder, max_bid):
        """
        Place a proxy bid on an auction listing.

        Args:
            listing_id: Primary key of the Listing to bid on
            bidder: The authenticated User placing the bid
            max_bid: The most the bidder is willing to pay

        Returns:
            BidResult with outcome details

        Raises:
            BidConflict: the listing kept changing underneath every attempt
        """
        amount = _parse_amount(max_bid)
        if amount is None:
            return BidResult.rejected(
                BidRejection.INVALID_INPUT,
                'max_bid must be a positive amount in dollars and cents.',
            )

        attempts = getattr(settings, 'BID_MAX_ATTEMPTS', DEFAULT_MAX_ATTEMPTS)
        for attempt in range(1, attempts + 1):
            try:
                return BidService._place_bid_once(listing_id, bidder, amount)
            except BidConflict as e:
                logger.warning(f"Bid conflict on listing {listing_id} (attempt {attempt}/{attempts}): {e}")

        raise BidConflict(f"Listing {listing_id} changed on each of {attempts} attempts")

    @staticmethod
    @transaction.atomic
    def _place_bid_once(listing_id, bidder, max_bid):
        listing = _lock_listing(listing_id)
        if listing is None:
            return BidResult.rejected(BidRejection.NOT_FOUND, 'Listing not found.')

        now = timezone.now()
        rejection = _validate(listing, bidder, max_bid, now)
        if rejection:
            return rejection

        winning_bid = (
            Bid.objects.select_for_update()
            .filter(listing=listing, is_winning=True)
            .order_by('-max_bid', 'pk')
            .first()
        )

        if winning_bid and winning_bid.bidder_id == bidder.pk:
            return _raise_ceiling(listing, winning_bid, max_bid)

        resolution = resolve_proxy(
            max_bid,
            leader_max=winning_bid.max_bid if winning_bid else None,
            starting_price=listing.starting_price,
        )

        caller_bid = _write_bid_rows(listing, bidder, max_bid, winning_bid, resolution)

        # Window is judged against the end time as it was before this bid
        new_end = extended_auction_end(
            listing.auction_end, now, listing.auto_extend_minutes, listing.auto_extend
        )
        _commit_listing(listing, resolution.visible_price, now, new_end)

        xp_awarded = _award_bid_xp(listing, bidder)

        price = resolution.visible_price
        if resolution.challenger_wins:
            message = f"You're the high bidder at ${price:.2f} (max: ${max_bid:.2f})."
        elif resolution.case == TIED_LEADER:
            message = f'Another bidder already has a maximum of ${price:.2f}. Earlier bids win ties.'
        else:
            message = f'You were outbid! Another bidder has a higher maximum. Current price: ${price:.2f}'

        logger.info(
            f"Bid on listing {listing.pk} by user {bidder.pk}: {resolution.case}, "
            f"price ${price}, bid #{listing.bid_count}"
        )

        return BidResult(
            success=True,
            message=message,
            current_bid=listing.current_bid,
            bid_count=listing.bid_count,
            is_winning=resolution.challenger_wins,
            your_max_bid=max_bid,
            auction_end=listing.auction_end,
            bid=caller_bid,
            xp_awarded=xp_awarded,
        )


def _parse_amount(value):
    """Coerce to a positive, finite, cent-precise Decimal or return None."""
    if isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not amount.is_finite() or amount <= 0 or amount > MAX_BID_AMOUNT:
        return None
    if amount != amount.quantize(CENT):
        return None
    return amount.quantize(CENT)


def _lock_listing(listing_id):
    try:
        return Listing.objects.select_for_update().filter(pk=listing_id).first()
    except (ValueError, TypeError):
        return None


def _validate(listing, bidder, max_bid, now):
    """First failing check wins."""
    if listing.status != 'active':
        return BidResult.rejected(BidRejection.LISTING_NOT_ACTIVE, 'This listing is not currently active.')

    if not listing.is_auction:
        return BidResult.rejected(BidRejection.NOT_BIDDABLE, 'This listing does not accept bids.')

    if listing.is_auction_ended(now):
        return BidResult.rejected(BidRejection.AUCTION_ENDED, 'This auction has already ended.')

    if not listing.has_auction_started(now):
        return BidResult.rejected(BidRejection.AUCTION_NOT_STARTED, 'This auction has not started yet.')

    if bidder.pk == listing.seller_id:
        return BidResult.rejected(BidRejection.SELF_BID_FORBIDDEN, 'You cannot bid on your own listing.')

    minimum_bid = get_minimum_bid(listing.bid_count, listing.current_bid, listing.starting_price)
    if max_bid < minimum_bid:
        return BidResult.rejected(
            BidRejection.BID_TOO_LOW,
            f'Your maximum bid must be at least ${minimum_bid:.2f}',
            minimum_bid=minimum_bid,
            current_bid=listing.current_bid,
            bid_count=listing.bid_count,
        )

    return None


def _raise_ceiling(listing, winning_bid, max_bid):
    """The leader bids again: raise their private max, the visible price stays put."""
    if max_bid <= winning_bid.max_bid:
        return BidResult.rejected(
            BidRejection.MAX_BID_NOT_INCREASED,
            f'Your new maximum bid must exceed your current maximum of ${winning_bid.max_bid:.2f}',
            current_bid=listing.current_bid,
            bid_count=listing.bid_count,
            is_winning=True,
            your_max_bid=winning_bid.max_bid,
        )

    _update_leader(winning_bid, max_bid=max_bid)

    return BidResult(
        success=True,
        message=f"Your maximum bid has been updated to ${max_bid:.2f}. You're still the high bidder at ${listing.current_bid:.2f}.",
        current_bid=listing.current_bid,
        bid_count=listing.bid_count,
        is_winning=True,
        your_max_bid=max_bid,
        auction_end=listing.auction_end,
        bid=winning_bid,
    )


def _write_bid_rows(listing, bidder, max_bid, winning_bid, resolution):
    """Apply the ledger changes for a resolved contest. Returns the caller's row."""
    price = resolution.visible_price

    if resolution.case == FIRST_BID:
        return _create_bid(listing, bidder, price, max_bid, is_winning=True)

    if resolution.case == OUTBID_LEADER:
        # Flip the old leader first; only one winning row may exist
        _update_leader(winning_bid, is_winning=False)
        return _create_bid(listing, bidder, price, max_bid, is_winning=True)

    # Leader holds: their row shows the new price, the challenger's attempt
    # is recorded at its own ceiling
    _update_leader(winning_bid, amount=price)
    return _create_bid(listing, bidder, max_bid, max_bid, is_winning=False)


def _update_leader(winning_bid, **changes):
    """Update the leading row only if it is still the leader with the ceiling we read."""
    updated = Bid.objects.filter(
        pk=winning_bid.pk,
        is_winning=True,
        max_bid=winning_bid.max_bid,
    ).update(**changes)
    if not updated:
        raise BidConflict(f"Leading bid {winning_bid.pk} changed")
    for field, value in changes.items():
        setattr(winning_bid, field, value)


def _create_bid(listing, bidder, amount, max_bid, is_winning):
    try:
        return Bid.objects.create(
            listing=listing,
            bidder=bidder,
            amount=amount,
            max_bid=max_bid,
            is_winning=is_winning,
            is_auto_bid=False,
        )
    except IntegrityError as e:
        # Another writer already holds the winning slot for this listing
        raise BidConflict(f"Could not record bid on listing {listing.pk}") from e


def _commit_listing(listing, visible_price, now, new_end):
    changes = {
        'current_bid': visible_price,
        'bid_count': F('bid_count') + 1,
        'updated': now,
    }
    if new_end:
        changes['auction_end'] = new_end

    updated = Listing.objects.filter(pk=listing.pk, bid_count=listing.bid_count).update(**changes)
    if not updated:
        raise BidConflict(f"Listing {listing.pk} was bid on concurrently")

    listing.current_bid = visible_price
    listing.bid_count += 1
    listing.updated = now
    if new_end:
        logger.info(f"Listing {listing.pk} extended from {listing.auction_end} to {new_end} (anti-snipe)")
        listing.auction_end = new_end


def _award_bid_xp(listing, bidder):
    """Best effort: a failure here rolls back its own savepoint, never the bid."""
    try:
        XpService.award_xp(
            bidder,
            'place_bid',
            description=f'Placed bid on "{listing.title}"',
            reference_id=listing.pk,
        )
        return True
    except Exception:
        logger.exception(f"Failed to award bid XP to user {bidder.pk} for listing {listing.pk}")
        return False
