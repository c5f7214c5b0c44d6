from django.urls import path

from . import views_offboarding

urlpatterns = [
    path("", views_offboarding.give_notice, name="give_notice"),
    path("<uuid:notice_id>/", views_offboarding.update_notice, name="update_notice"),
    path("<uuid:notice_id>/cancel/", views_offboarding.cancel_notice, name="cancel_notice"),
    path("<uuid:notice_id>/complete/", views_offboarding.complete_notice, name="complete_notice"),
]
