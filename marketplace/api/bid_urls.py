from django.urls import path
from . import views

app_name = 'bids_api'

urlpatterns = [
    path('', views.PlaceBidView.as_view(), name='place_bid'),
    path('my-bids/', views.MyBidsView.as_view(), name='my_bids'),
]
