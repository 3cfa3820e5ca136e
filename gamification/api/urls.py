from django.urls import path
from . import views

app_name = 'gamification_api'

urlpatterns = [
    path('xp-history/', views.XpHistoryView.as_view(), name='xp_history'),
    path('leaderboard/', views.LeaderboardView.as_view(), name='leaderboard'),
]
