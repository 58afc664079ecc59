"""
URL Configuration for the portal JSON API.

All endpoints are mounted under /api/.
"""
from django.urls import path
from . import views_api

urlpatterns = [
    # Marksheets
    path('generate-pdf', views_api.api_generate_pdf, name='api-generate-pdf'),

    # Push notifications
    path('subscription-check', views_api.api_subscription_check, name='api-subscription-check'),
]
