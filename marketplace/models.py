from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone
from decimal import Decimal


class Listing(models.Model):
    CONDITION_CHOICES = [
        ('mint', 'Mint'),
        ('near_mint', 'Near Mint'),
        ('lightly_played', 'Lightly Played'),
        ('moderately_played', 'Moderately Played'),
        ('heavily_played', 'Heavily Played'),
        ('damaged', 'Damaged'),
    ]

    LISTING_TYPE_CHOICES = [
        ('auction', 'Auction'),
        ('buy_now', 'Buy Now'),
        ('auction_with_buy_now', 'Auction with Buy Now'),
    ]

    # Listing types that accept bids
    BIDDABLE_TYPES = ('auction', 'auction_with_buy_now')

    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('active', 'Active'),
        ('ended', 'Ended'),
        ('sold', 'Sold'),
        ('unsold', 'Unsold'),
        ('cancelled', 'Cancelled'),
    ]

    GRADING_COMPANY_CHOICES = [
        ('', 'Ungraded'),
        ('psa', 'PSA'),
        ('beckett', 'Beckett'),
        ('cgc', 'CGC'),
        ('sgc', 'SGC'),
        ('tag', 'TAG'),
        ('other', 'Other'),
    ]

    seller = models.ForeignKey(User, on_delete=models.CASCADE, related_name='listings')

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    condition = models.CharField(max_length=20, choices=CONDITION_CHOICES, blank=True)

    # Grading info
    grading_company = models.CharField(max_length=10, choices=GRADING_COMPANY_CHOICES, blank=True)
    grade = models.DecimalField(max_digits=3, decimal_places=1, null=True, blank=True)

    # Pricing
    listing_type = models.CharField(max_length=20, choices=LISTING_TYPE_CHOICES, default='auction')
    starting_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    reserve_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    buy_now_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    current_bid = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    bid_count = models.PositiveIntegerField(default=0)
    final_sale_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Auction window
    auction_start = models.DateTimeField(null=True, blank=True)
    auction_end = models.DateTimeField(null=True, blank=True)

    # Extended bidding (anti-sniping)
    auto_extend = models.BooleanField(default=True)
    auto_extend_minutes = models.PositiveIntegerField(default=2)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    view_count = models.PositiveIntegerField(default=0)

    created = models.DateTimeField(auto_now_add=True)
    updated = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created']
        indexes = [
            models.Index(fields=['status', '-created'], name='listing_status_created_idx'),
            models.Index(fields=['status', 'auction_end'], name='listing_status_end_idx'),
            models.Index(fields=['seller', 'status'], name='listing_seller_status_idx'),
        ]

    def __str__(self):
        return self.title

    @property
    def is_auction(self):
        return self.listing_type in self.BIDDABLE_TYPES

    def is_auction_ended(self, now=None):
        if not self.is_auction or not self.auction_end:
            return False
        return self.auction_end <= (now or timezone.now())

    def has_auction_started(self, now=None):
        if not self.auction_start:
            return True
        return self.auction_start <= (now or timezone.now())

    def time_remaining(self):
        if not self.is_auction or not self.auction_end:
            return None
        remaining = self.auction_end - timezone.now()
        if remaining.total_seconds() < 0:
            return None
        return remaining

    def reserve_met(self):
        """Reserve is informational for bidding; only closing an auction checks it."""
        if self.reserve_price is None:
            return True
        return self.current_bid >= self.reserve_price

    def get_winning_bid(self):
        return self.bids.filter(is_winning=True).order_by('-max_bid', 'pk').first()


class Bid(models.Model):
    listing = models.ForeignKey(Listing, on_delete=models.CASCADE, related_name='bids')
    bidder = models.ForeignKey(User, on_delete=models.CASCADE, related_name='bids')

    # Visible price this bid represents, not necessarily the bidder's ceiling
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    # Bidder's private ceiling, only used for proxy resolution
    max_bid = models.DecimalField(max_digits=10, decimal_places=2)

    is_winning = models.BooleanField(default=False)
    # Reserved for system generated rows; always False today
    is_auto_bid = models.BooleanField(default=False)

    created = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created', '-pk']
        indexes = [
            models.Index(fields=['listing', 'is_winning'], name='bid_listing_winning_idx'),
            models.Index(fields=['bidder', '-created'], name='bid_bidder_created_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['listing'],
                condition=models.Q(is_winning=True),
                name='one_winning_bid_per_listing',
            ),
        ]

    def __str__(self):
        return f"{self.bidder.username} bid ${self.amount} on {self.listing.title}"
