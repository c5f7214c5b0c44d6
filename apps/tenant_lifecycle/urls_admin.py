from django.urls import path

from . import views_offboarding

urlpatterns = [
    path("fast-track-offboarding/", views_offboarding.fast_track, name="fast_track_offboarding"),
]
