"""
Tests for bids racing on the same listing.
"""
import threading
import unittest
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth.models import User
from django.db import connection
from django.test import TestCase, TransactionTestCase, override_settings
from django.utils import timezone

from marketplace.models import Listing, Bid
from marketplace.services import BidService, BidConflict
from marketplace.services import bid_service


class StaleSnapshotTests(TestCase):
    """A bid computed from an outdated listing read must be retried, never applied."""

    def setUp(self):
        self.seller = User.objects.create_user('seller', 'seller@test.com', 'pass123')
        self.bidder1 = User.objects.create_user('bidder1', 'bidder1@test.com', 'pass123')
        self.bidder2 = User.objects.create_user('bidder2', 'bidder2@test.com', 'pass123')
        self.bidder3 = User.objects.create_user('bidder3', 'bidder3@test.com', 'pass123')
        self.listing = Listing.objects.create(
            seller=self.seller,
            title='Lugia Neo Genesis',
            starting_price=Decimal('10.00'),
            listing_type='auction',
            status='active',
            auction_end=timezone.now() + timedelta(days=3),
        )

    def test_stale_read_is_retried(self):
        BidService.place_bid(self.listing.pk, self.bidder1, Decimal('10.00'))
        stale = Listing.objects.get(pk=self.listing.pk)
        BidService.place_bid(self.listing.pk, self.bidder2, Decimal('15.00'))

        real_lock = bid_service._lock_listing
        calls = []

        def lock_once_stale(listing_id):
            calls.append(listing_id)
            if len(calls) == 1:
                return stale
            return real_lock(listing_id)

        with patch('marketplace.services.bid_service._lock_listing', side_effect=lock_once_stale):
            with self.assertLogs('marketplace', level='WARNING'):
                result = BidService.place_bid(self.listing.pk, self.bidder3, Decimal('20.00'))

        self.assertEqual(len(calls), 2)
        self.assertTrue(result.success)
        self.assertTrue(result.is_winning)

        self.listing.refresh_from_db()
        self.assertEqual(self.listing.current_bid, Decimal('16.00'))
        self.assertEqual(self.listing.bid_count, 3)

        winners = Bid.objects.filter(listing=self.listing, is_winning=True)
        self.assertEqual(winners.count(), 1)
        self.assertEqual(winners.get().bidder, self.bidder3)
        # The rolled back attempt left no row behind
        self.assertEqual(Bid.objects.filter(listing=self.listing, bidder=self.bidder3).count(), 1)

    @override_settings(BID_MAX_ATTEMPTS=3)
    def test_conflict_raised_after_retries_exhausted(self):
        BidService.place_bid(self.listing.pk, self.bidder1, Decimal('10.00'))
        stale = Listing.objects.get(pk=self.listing.pk)
        BidService.place_bid(self.listing.pk, self.bidder2, Decimal('15.00'))

        with patch('marketplace.services.bid_service._lock_listing', return_value=stale) as mock_lock:
            with self.assertLogs('marketplace', level='WARNING'):
                with self.assertRaises(BidConflict):
                    BidService.place_bid(self.listing.pk, self.bidder3, Decimal('20.00'))

        self.assertEqual(mock_lock.call_count, 3)

        self.listing.refresh_from_db()
        self.assertEqual(self.listing.current_bid, Decimal('11.00'))
        self.assertEqual(self.listing.bid_count, 2)
        winner = Bid.objects.get(listing=self.listing, is_winning=True)
        self.assertEqual(winner.bidder, self.bidder2)
        self.assertFalse(Bid.objects.filter(bidder=self.bidder3).exists())

    def test_leader_changed_underneath_is_a_conflict(self):
        BidService.place_bid(self.listing.pk, self.bidder1, Decimal('20.00'))
        leader = Bid.objects.get(listing=self.listing, is_winning=True)
        Bid.objects.filter(pk=leader.pk).update(max_bid=Decimal('25.00'))

        with self.assertRaises(BidConflict):
            bid_service._update_leader(leader, is_winning=False)

        leader.refresh_from_db()
        self.assertTrue(leader.is_winning)


@unittest.skipUnless(connection.vendor == 'postgresql', 'Row locking needs PostgreSQL')
class ConcurrentBidTests(TransactionTestCase):
    """Real threads bidding at once against a locking backend."""

    def setUp(self):
        self.seller = User.objects.create_user('seller', 'seller@test.com', 'pass123')
        self.bidders = [
            User.objects.create_user(f'bidder{i}', f'bidder{i}@test.com', 'pass123')
            for i in range(8)
        ]
        self.listing = Listing.objects.create(
            seller=self.seller,
            title='Shining Charizard',
            starting_price=Decimal('10.00'),
            listing_type='auction',
            status='active',
            auction_end=timezone.now() + timedelta(days=1),
        )

    def test_simultaneous_bids_serialize(self):
        barrier = threading.Barrier(len(self.bidders))
        results = []
        errors = []

        def place(user, amount):
            try:
                barrier.wait()
                results.append(BidService.place_bid(self.listing.pk, user, amount))
            except Exception as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [
            threading.Thread(target=place, args=(user, Decimal('20.00') + i * 5))
            for i, user in enumerate(self.bidders)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        accepted = [r for r in results if r.success]

        self.listing.refresh_from_db()
        self.assertEqual(self.listing.bid_count, len(accepted))
        self.assertEqual(Bid.objects.filter(listing=self.listing).count(), len(accepted))

        winners = Bid.objects.filter(listing=self.listing, is_winning=True)
        self.assertEqual(winners.count(), 1)
        top = max(Bid.objects.filter(listing=self.listing), key=lambda b: b.max_bid)
        self.assertEqual(winners.get().pk, top.pk)
        self.assertLessEqual(self.listing.current_bid, top.max_bid)
