from django.contrib import admin
from .models import Listing, Bid


class BidInline(admin.TabularInline):
    model = Bid
    fields = ['bidder', 'amount', 'max_bid', 'is_winning', 'is_auto_bid', 'created']
    readonly_fields = ['bidder', 'amount', 'max_bid', 'is_winning', 'is_auto_bid', 'created']
    extra = 0
    can_delete = False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('bidder')


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ['title', 'seller', 'listing_type', 'status', 'current_bid', 'bid_count', 'auction_end']
    list_filter = ['status', 'listing_type', 'condition', 'grading_company', 'auto_extend']
    search_fields = ['title', 'description', 'seller__username']
    raw_id_fields = ['seller']
    readonly_fields = ['current_bid', 'bid_count', 'final_sale_price', 'view_count', 'created', 'updated']
    inlines = [BidInline]
    fieldsets = (
        (None, {
            'fields': ('seller', 'title', 'description', 'condition', 'grading_company', 'grade')
        }),
        ('Pricing', {
            'fields': ('listing_type', 'starting_price', 'reserve_price', 'buy_now_price')
        }),
        ('Auction', {
            'fields': ('auction_start', 'auction_end', 'auto_extend', 'auto_extend_minutes')
        }),
        ('Status', {
            'fields': ('status', 'current_bid', 'bid_count', 'final_sale_price', 'view_count', 'created', 'updated')
        }),
    )


@admin.register(Bid)
class BidAdmin(admin.ModelAdmin):
    list_display = ['listing', 'bidder', 'amount', 'max_bid', 'is_winning', 'created']
    list_filter = ['is_winning', 'created']
    search_fields = ['listing__title', 'bidder__username']
    raw_id_fields = ['listing', 'bidder']
    readonly_fields = ['listing', 'bidder', 'amount', 'max_bid', 'is_winning', 'is_auto_bid', 'created']
