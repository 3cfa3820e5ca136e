from rest_framework import generics, views
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response

from accounts.models import Profile
from gamification.models import XpEvent
from api.pagination import StandardResultsPagination
from .serializers import XpEventSerializer, LeaderboardEntrySerializer

LEADERBOARD_SIZE = 50


class XpHistoryView(generics.ListAPIView):
    """The caller's XP ledger, newest first"""
    permission_classes = [IsAuthenticated]
    serializer_class = XpEventSerializer
    pagination_class = StandardResultsPagination

    def get_queryset(self):
        return XpEvent.objects.filter(user=self.request.user).order_by('-created', '-pk')


class LeaderboardView(views.APIView):
    """Top collectors by XP"""
    permission_classes = [AllowAny]

    def get(self, request):
        profiles = list(
            Profile.objects.select_related('user')
            .order_by('-xp', 'user__username')[:LEADERBOARD_SIZE]
        )
        ranks = {profile.pk: index for index, profile in enumerate(profiles, start=1)}
        serializer = LeaderboardEntrySerializer(profiles, many=True, context={'ranks': ranks})
        return Response({'leaderboard': serializer.data})
