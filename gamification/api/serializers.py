from rest_framework import serializers
from accounts.models import Profile
from gamification.models import XpEvent


class XpEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = XpEvent
        fields = ['id', 'event_type', 'xp_amount', 'description', 'reference_id', 'created']
        read_only_fields = fields


class LeaderboardEntrySerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True)
    rank = serializers.SerializerMethodField()

    class Meta:
        model = Profile
        fields = ['rank', 'username', 'display_name', 'tier', 'xp']

    def get_rank(self, obj):
        return self.context['ranks'][obj.pk]
