"""
Tests for XP awards and tier progression.
"""
from django.contrib.auth.models import User
from django.test import TestCase, override_settings

from accounts.models import Profile
from gamification.models import XpEvent
from gamification.services import XpService


class TierForXpTests(TestCase):

    def test_thresholds(self):
        self.assertEqual(XpService.tier_for_xp(0), 'bronze')
        self.assertEqual(XpService.tier_for_xp(999), 'bronze')
        self.assertEqual(XpService.tier_for_xp(1000), 'silver')
        self.assertEqual(XpService.tier_for_xp(4999), 'silver')
        self.assertEqual(XpService.tier_for_xp(5000), 'gold')
        self.assertEqual(XpService.tier_for_xp(20000), 'platinum')
        self.assertEqual(XpService.tier_for_xp(50000), 'diamond')
        self.assertEqual(XpService.tier_for_xp(10 ** 6), 'diamond')

    @override_settings(XP_TIERS=[('silver', 100), ('bronze', 10)])
    def test_below_lowest_threshold_uses_default(self):
        self.assertEqual(XpService.tier_for_xp(5, default='bronze'), 'bronze')
        self.assertEqual(XpService.tier_for_xp(50), 'bronze')
        self.assertEqual(XpService.tier_for_xp(150), 'silver')


class AwardXpTests(TestCase):

    def setUp(self):
        self.user = User.objects.create_user('ash', 'ash@test.com', 'pass123')

    def test_award_records_event_and_total(self):
        profile = XpService.award_xp(self.user, 'place_bid', description='Placed bid', reference_id=7)

        self.assertEqual(profile.xp, 5)
        event = XpEvent.objects.get(user=self.user)
        self.assertEqual(event.xp_amount, 5)
        self.assertEqual(event.reference_id, '7')
        self.assertEqual(event.description, 'Placed bid')

    def test_explicit_amount(self):
        profile = XpService.award_xp(self.user, 'win_auction', amount=250)
        self.assertEqual(profile.xp, 250)

    def test_total_matches_ledger(self):
        for _ in range(3):
            XpService.award_xp(self.user, 'place_bid')
        XpService.award_xp(self.user, 'win_auction')

        profile = Profile.objects.get(user=self.user)
        ledger = sum(XpEvent.objects.filter(user=self.user).values_list('xp_amount', flat=True))
        self.assertEqual(profile.xp, 55)
        self.assertEqual(profile.xp, ledger)

    def test_tier_promotion(self):
        Profile.objects.filter(user=self.user).update(xp=4990, tier='silver')

        with self.assertLogs('gamification', level='INFO'):
            profile = XpService.award_xp(self.user, 'win_auction')

        self.assertEqual(profile.xp, 5030)
        self.assertEqual(profile.tier, 'gold')
        profile.refresh_from_db()
        self.assertEqual(profile.tier, 'gold')

    def test_missing_profile_is_created(self):
        Profile.objects.filter(user=self.user).delete()
        self.user = User.objects.get(pk=self.user.pk)

        profile = XpService.award_xp(self.user, 'place_bid')

        self.assertEqual(profile.xp, 5)
        self.assertEqual(profile.tier, 'bronze')

    def test_long_description_truncated(self):
        XpService.award_xp(self.user, 'place_bid', description='x' * 400)
        self.assertEqual(len(XpEvent.objects.get(user=self.user).description), 255)

    def test_unknown_event_type(self):
        with self.assertRaises(KeyError):
            XpService.award_xp(self.user, 'made_friends')
        self.assertFalse(XpEvent.objects.exists())
