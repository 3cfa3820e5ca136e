import logging
from celery import shared_task
from django.db import transaction
from django.utils import timezone

from .models import Listing

logger = logging.getLogger(__name__)


@shared_task
def close_ended_auctions():
    """
    Process ended auctions:
    - Auctions with a winning bid that meets the reserve are marked sold
    - Everything else is marked unsold
    - Winners earn XP
    """
    ended_ids = list(
        Listing.objects.filter(
            listing_type__in=Listing.BIDDABLE_TYPES,
            status='active',
            auction_end__lte=timezone.now(),
        ).values_list('pk', flat=True)
    )

    processed = 0

    for listing_id in ended_ids:
        try:
            if _close_auction(listing_id):
                processed += 1
        except Exception as e:
            logger.exception(f"Error closing auction {listing_id}: {e}")

    if processed:
        logger.info(f"Closed {processed} ended auctions")

    return processed


@transaction.atomic
def _close_auction(listing_id):
    from gamification.services import XpService

    listing = Listing.objects.select_for_update().get(pk=listing_id)

    # A late bid may have pushed the end out since the listing was queried
    if listing.status != 'active' or not listing.is_auction_ended():
        return False

    winning_bid = listing.get_winning_bid()

    if winning_bid and listing.reserve_met():
        listing.status = 'sold'
        listing.final_sale_price = listing.current_bid
        listing.save(update_fields=['status', 'final_sale_price', 'updated'])
        logger.info(f"Auction ended: Listing {listing.pk} won by user {winning_bid.bidder_id} for ${listing.current_bid}")

        try:
            XpService.award_xp(
                winning_bid.bidder,
                'win_auction',
                description=f'Won auction "{listing.title}"',
                reference_id=listing.pk,
            )
        except Exception:
            logger.exception(f"Failed to award win XP to user {winning_bid.bidder_id} for listing {listing.pk}")
    else:
        listing.status = 'unsold'
        listing.save(update_fields=['status', 'updated'])
        if winning_bid:
            logger.info(f"Auction ended below reserve: Listing {listing.pk} at ${listing.current_bid}")
        else:
            logger.info(f"Auction ended with no bids: Listing {listing.pk}")

    return True
