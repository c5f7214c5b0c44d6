from django.urls import path

from . import views

urlpatterns = [
    path("payments/<uuid:payment_id>/checkout/", views.payment_checkout, name="payment_checkout"),
    path("payments/<uuid:payment_id>/retry/", views.payment_retry, name="payment_retry"),
    path("landlord/stripe/connect/", views.stripe_connect, name="stripe_connect"),
]
