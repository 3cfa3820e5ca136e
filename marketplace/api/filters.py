import django_filters
from marketplace.models import Listing, Bid


class ListingFilter(django_filters.FilterSet):
    """Filter for listings"""
    min_price = django_filters.NumberFilter(field_name='current_bid', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='current_bid', lookup_expr='lte')
    ending_before = django_filters.IsoDateTimeFilter(field_name='auction_end', lookup_expr='lte')
    seller = django_filters.CharFilter(field_name='seller__username')

    class Meta:
        model = Listing
        fields = ['listing_type', 'condition', 'grading_company', 'min_price', 'max_price', 'ending_before', 'seller']


class MyBidFilter(django_filters.FilterSet):
    """Filter the caller's bids by outcome"""
    status = django_filters.CharFilter(method='filter_by_status')

    class Meta:
        model = Bid
        fields = ['status']

    def filter_by_status(self, queryset, name, value):
        if value == 'active':
            return queryset.filter(is_winning=True, listing__status='active')
        elif value == 'won':
            return queryset.filter(is_winning=True, listing__status__in=['ended', 'sold'])
        elif value == 'lost':
            return queryset.filter(is_winning=False)
        return queryset
