"""
Tests for the proxy bidding arithmetic (no database).
"""
from datetime import timedelta
from decimal import Decimal

from django.test import SimpleTestCase, override_settings
from django.utils import timezone

from marketplace.services.proxy import (
    FIRST_BID, OUTBID_LEADER, TIED_LEADER, BELOW_LEADER,
    extended_auction_end, get_bid_increment, get_minimum_bid, resolve_proxy,
)


class BidIncrementTests(SimpleTestCase):

    def test_increment_bands(self):
        self.assertEqual(get_bid_increment(Decimal('0.00')), Decimal('1.00'))
        self.assertEqual(get_bid_increment(Decimal('24.99')), Decimal('1.00'))
        self.assertEqual(get_bid_increment(Decimal('25.00')), Decimal('2.00'))
        self.assertEqual(get_bid_increment(Decimal('99.99')), Decimal('2.00'))
        self.assertEqual(get_bid_increment(Decimal('100.00')), Decimal('5.00'))
        self.assertEqual(get_bid_increment(Decimal('250.00')), Decimal('10.00'))
        self.assertEqual(get_bid_increment(Decimal('500.00')), Decimal('25.00'))
        self.assertEqual(get_bid_increment(Decimal('1000.00')), Decimal('50.00'))
        self.assertEqual(get_bid_increment(Decimal('250000.00')), Decimal('50.00'))

    @override_settings(BID_INCREMENTS=[(Decimal('49.99'), Decimal('1.00')), (None, Decimal('5.00'))])
    def test_increment_table_is_configurable(self):
        self.assertEqual(get_bid_increment(Decimal('40.00')), Decimal('1.00'))
        self.assertEqual(get_bid_increment(Decimal('50.00')), Decimal('5.00'))

    @override_settings(BID_INCREMENTS=[(Decimal('10.00'), Decimal('0.50')), (Decimal('20.00'), Decimal('1.00'))])
    def test_price_above_every_band_uses_last_increment(self):
        self.assertEqual(get_bid_increment(Decimal('500.00')), Decimal('1.00'))


class MinimumBidTests(SimpleTestCase):

    def test_first_bid_minimum_is_starting_price(self):
        self.assertEqual(get_minimum_bid(0, Decimal('0.00'), Decimal('10.00')), Decimal('10.00'))

    def test_first_bid_without_starting_price_uses_current_bid(self):
        self.assertEqual(get_minimum_bid(0, Decimal('3.00'), None), Decimal('3.00'))

    def test_later_bids_need_one_increment_over_current(self):
        self.assertEqual(get_minimum_bid(4, Decimal('10.00'), Decimal('5.00')), Decimal('11.00'))
        self.assertEqual(get_minimum_bid(4, Decimal('120.00'), Decimal('5.00')), Decimal('125.00'))


class ResolveProxyTests(SimpleTestCase):

    def test_first_bid_opens_at_starting_price(self):
        resolution = resolve_proxy(Decimal('50.00'), starting_price=Decimal('10.00'))
        self.assertEqual(resolution.case, FIRST_BID)
        self.assertEqual(resolution.visible_price, Decimal('10.00'))
        self.assertTrue(resolution.challenger_wins)

    def test_first_bid_without_starting_price_opens_at_max(self):
        resolution = resolve_proxy(Decimal('25.00'))
        self.assertEqual(resolution.visible_price, Decimal('25.00'))

    def test_challenger_over_ceiling_pays_one_increment_more(self):
        resolution = resolve_proxy(Decimal('100.00'), leader_max=Decimal('30.00'))
        self.assertEqual(resolution.case, OUTBID_LEADER)
        self.assertEqual(resolution.visible_price, Decimal('32.00'))
        self.assertTrue(resolution.challenger_wins)

    def test_challenger_win_is_capped_at_their_max(self):
        resolution = resolve_proxy(Decimal('10.50'), leader_max=Decimal('10.00'))
        self.assertEqual(resolution.visible_price, Decimal('10.50'))

    def test_tie_keeps_leader(self):
        resolution = resolve_proxy(Decimal('15.00'), leader_max=Decimal('15.00'))
        self.assertEqual(resolution.case, TIED_LEADER)
        self.assertEqual(resolution.visible_price, Decimal('15.00'))
        self.assertFalse(resolution.challenger_wins)

    def test_leader_counters_lower_challenger(self):
        resolution = resolve_proxy(Decimal('30.00'), leader_max=Decimal('50.00'))
        self.assertEqual(resolution.case, BELOW_LEADER)
        self.assertEqual(resolution.visible_price, Decimal('32.00'))
        self.assertFalse(resolution.challenger_wins)

    def test_leader_counter_is_capped_at_leader_max(self):
        resolution = resolve_proxy(Decimal('31.00'), leader_max=Decimal('32.00'))
        self.assertEqual(resolution.visible_price, Decimal('32.00'))


class ExtendedAuctionEndTests(SimpleTestCase):

    def setUp(self):
        self.now = timezone.now()

    def test_bid_inside_window_extends_from_original_end(self):
        end = self.now + timedelta(minutes=1)
        self.assertEqual(extended_auction_end(end, self.now, 2), end + timedelta(minutes=2))

    def test_bid_exactly_at_window_edge_extends(self):
        end = self.now + timedelta(minutes=2)
        self.assertEqual(extended_auction_end(end, self.now, 2), end + timedelta(minutes=2))

    def test_bid_outside_window_does_not_extend(self):
        end = self.now + timedelta(hours=1)
        self.assertIsNone(extended_auction_end(end, self.now, 2))

    def test_auto_extend_disabled(self):
        end = self.now + timedelta(minutes=1)
        self.assertIsNone(extended_auction_end(end, self.now, 2, auto_extend=False))

    def test_no_end_time(self):
        self.assertIsNone(extended_auction_end(None, self.now, 2))

    @override_settings(ANTI_SNIPE_WINDOW_MINUTES=5)
    def test_window_is_configurable(self):
        end = self.now + timedelta(minutes=3)
        self.assertEqual(extended_auction_end(end, self.now, 10), end + timedelta(minutes=10))
