from rest_framework import generics, status, views, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.db.models import F
from django.shortcuts import get_object_or_404

from marketplace.models import Listing, Bid
from marketplace.services import BidService, BidRejection
from api.pagination import StandardResultsPagination
from .serializers import (
    ListingListSerializer, ListingDetailSerializer,
    BidSerializer, MyBidSerializer, BidCreateSerializer, BidResultSerializer,
)
from .filters import ListingFilter, MyBidFilter


class ListingViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Browse listings.
    List shows active listings only; detail works for any status.
    """
    permission_classes = [AllowAny]
    pagination_class = StandardResultsPagination
    filterset_class = ListingFilter
    ordering_fields = ['current_bid', 'created', 'auction_end', 'bid_count']
    ordering = ['-created']

    def get_queryset(self):
        queryset = Listing.objects.select_related('seller')
        if self.action == 'list':
            queryset = queryset.filter(status='active')
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return ListingListSerializer
        return ListingDetailSerializer

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        # Record view without touching bid state
        Listing.objects.filter(pk=instance.pk).update(view_count=F('view_count') + 1)
        instance.view_count += 1
        serializer = self.get_serializer(instance)
        return Response(serializer.data)

    @action(detail=True, methods=['get'])
    def bids(self, request, pk=None):
        """Get bid history for a listing"""
        listing = get_object_or_404(Listing, pk=pk)
        bids = listing.bids.select_related('bidder').order_by('-created', '-pk')[:50]
        serializer = BidSerializer(bids, many=True)
        return Response(serializer.data)


class PlaceBidView(views.APIView):
    """Place a proxy bid. The bidder is always the authenticated caller."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = BidCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = BidService.place_bid(
            serializer.validated_data['listing_id'],
            request.user,
            serializer.validated_data['max_bid'],
        )

        if not result.success:
            body = {'error': result.message}
            if result.minimum_bid is not None:
                body['minimum_bid'] = result.minimum_bid
            if result.reason == BidRejection.NOT_FOUND:
                return Response(body, status=status.HTTP_404_NOT_FOUND)
            return Response(body, status=status.HTTP_400_BAD_REQUEST)

        return Response(BidResultSerializer(result).data, status=status.HTTP_200_OK)


class MyBidsView(generics.ListAPIView):
    """The caller's bids, newest first. ?status=active|won|lost|all"""
    permission_classes = [IsAuthenticated]
    serializer_class = MyBidSerializer
    pagination_class = StandardResultsPagination
    filterset_class = MyBidFilter

    def get_queryset(self):
        return (
            Bid.objects.filter(bidder=self.request.user)
            .select_related('listing', 'listing__seller')
            .order_by('-created', '-pk')
        )
