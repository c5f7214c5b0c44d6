"""
Public onboarding URLs for the tenant self-service flow.
"""

from django.urls import path

from . import views_onboarding

urlpatterns = [
    path("<str:token>/", views_onboarding.onboarding_progress, name="progress"),
]
