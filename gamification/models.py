from django.db import models
from django.contrib.auth.models import User


class XpEvent(models.Model):
    """
    Append-only XP ledger. A profile's xp is the running total of these rows.
    """
    EVENT_TYPES = [
        ('place_bid', 'Placed Bid'),
        ('win_auction', 'Won Auction'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='xp_events')
    event_type = models.CharField(max_length=30, choices=EVENT_TYPES)
    xp_amount = models.IntegerField()
    description = models.CharField(max_length=255, blank=True)
    reference_id = models.CharField(max_length=64, blank=True)

    created = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created', '-pk']
        indexes = [
            models.Index(fields=['user', '-created'], name='xpevent_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.user.username} +{self.xp_amount} XP ({self.event_type})"
