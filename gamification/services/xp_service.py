"""
XP ledger and tier progression.

Every award appends an XpEvent and bumps the running total on the user's
Profile, then recomputes the tier from the threshold table.
"""
import logging

from django.conf import settings
from django.db import transaction

from accounts.models import Profile
from gamification.models import XpEvent

logger = logging.getLogger('gamification')

DEFAULT_XP_AWARDS = {
    'place_bid': 5,
    'win_auction': 40,
}

# (tier name, minimum xp), strictly increasing thresholds
DEFAULT_XP_TIERS = [
    ('bronze', 0),
    ('silver', 1000),
    ('gold', 5000),
    ('platinum', 20000),
    ('diamond', 50000),
]


def get_xp_tiers():
    return sorted(getattr(settings, 'XP_TIERS', DEFAULT_XP_TIERS), key=lambda tier: tier[1])


class XpService:

    @staticmethod
    def xp_for(event_type):
        awards = getattr(settings, 'XP_AWARDS', DEFAULT_XP_AWARDS)
        return awards[event_type]

    @staticmethod
    def tier_for_xp(xp, default=None):
        """Highest tier whose threshold has been reached."""
        for name, threshold in reversed(get_xp_tiers()):
            if xp >= threshold:
                return name
        return default

    @staticmethod
    @transaction.atomic
    def award_xp(user, event_type, amount=None, description='', reference_id=''):
        """
        Record an XP event and update the user's running total and tier.

        Args:
            user: The User earning XP
            event_type: One of XpEvent.EVENT_TYPES
            amount: XP to award, defaults to the configured award for event_type
            description: Human readable note shown in XP history
            reference_id: Related object id (e.g. the listing pk)

        Returns:
            The updated Profile
        """
        if amount is None:
            amount = XpService.xp_for(event_type)

        profile, _ = Profile.objects.select_for_update().get_or_create(user=user)

        XpEvent.objects.create(
            user=user,
            event_type=event_type,
            xp_amount=amount,
            description=description[:255],
            reference_id=str(reference_id),
        )

        profile.xp += amount
        new_tier = XpService.tier_for_xp(profile.xp, default=profile.tier)
        if new_tier != profile.tier:
            logger.info(f"User {user.pk} reached tier {new_tier} with {profile.xp} XP")
        profile.tier = new_tier
        profile.save(update_fields=['xp', 'tier', 'updated'])

        return profile
