from django.urls import path

from . import views_applications

urlpatterns = [
    path("units/<uuid:unit_id>/apply/", views_applications.apply, name="apply"),
    path("applications/<uuid:application_id>/decision/", views_applications.decide, name="decide"),
    path("applications/<uuid:application_id>/withdraw/", views_applications.withdraw, name="withdraw"),
    path("landlord/units/<uuid:unit_id>/invite-tenant/", views_applications.invite_tenant, name="invite_tenant"),
]
