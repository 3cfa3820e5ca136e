from django.urls import path, include

app_name = 'api'

urlpatterns = [
    path('bids/', include('marketplace.api.bid_urls')),
    path('marketplace/', include('marketplace.api.urls')),
    path('gamification/', include('gamification.api.urls')),
]
