from django.urls import path

from . import views

urlpatterns = [
    path("generate-payment/", views.generate_payment, name="generate_payment"),
]
