from rest_framework import serializers
from marketplace.models import Listing, Bid


class ListingListSerializer(serializers.ModelSerializer):
    """Compact serializer for listing lists/browse"""
    seller_username = serializers.CharField(source='seller.username', read_only=True)
    time_remaining = serializers.SerializerMethodField()

    class Meta:
        model = Listing
        fields = [
            'id', 'title', 'condition', 'grading_company', 'grade',
            'listing_type', 'status', 'starting_price', 'buy_now_price',
            'current_bid', 'bid_count', 'auction_start', 'auction_end',
            'time_remaining', 'seller_username', 'created',
        ]

    def get_time_remaining(self, obj):
        remaining = obj.time_remaining()
        if remaining:
            return int(remaining.total_seconds())
        return None


class ListingDetailSerializer(ListingListSerializer):
    """Full listing detail. Reserve amount stays private, only whether it is met."""
    reserve_met = serializers.SerializerMethodField()
    has_reserve = serializers.SerializerMethodField()

    class Meta(ListingListSerializer.Meta):
        fields = ListingListSerializer.Meta.fields + [
            'description', 'has_reserve', 'reserve_met', 'final_sale_price',
            'auto_extend', 'auto_extend_minutes', 'view_count', 'updated',
        ]

    def get_has_reserve(self, obj):
        return obj.reserve_price is not None

    def get_reserve_met(self, obj):
        return obj.reserve_met()


class BidSerializer(serializers.ModelSerializer):
    """Public bid history entry. Never exposes max_bid."""
    bidder_username = serializers.CharField(source='bidder.username', read_only=True)

    class Meta:
        model = Bid
        fields = ['id', 'amount', 'bidder_username', 'is_winning', 'created']
        read_only_fields = fields


class MyBidSerializer(serializers.ModelSerializer):
    """The caller's own bids, including their private max."""
    listing = ListingListSerializer(read_only=True)

    class Meta:
        model = Bid
        fields = ['id', 'listing', 'amount', 'max_bid', 'is_winning', 'created']
        read_only_fields = fields


class BidCreateSerializer(serializers.Serializer):
    """Serializer for placing a bid"""
    listing_id = serializers.IntegerField()
    max_bid = serializers.DecimalField(max_digits=10, decimal_places=2)

    def validate_max_bid(self, value):
        if value <= 0:
            raise serializers.ValidationError("max_bid must be a positive number")
        return value


class BidResultSerializer(serializers.Serializer):
    """Outcome of an accepted bid. Amounts render as JSON numbers."""
    message = serializers.CharField()
    current_bid = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    bid_count = serializers.IntegerField()
    is_winning = serializers.BooleanField()
    your_max_bid = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    auction_end = serializers.DateTimeField(allow_null=True)
