from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'marketplace_api'

router = DefaultRouter()
router.register('listings', views.ListingViewSet, basename='listing')

urlpatterns = [
    path('', include(router.urls)),
]
