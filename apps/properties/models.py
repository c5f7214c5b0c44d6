import builtins

from django.conf import settings
from django.db import models

from apps.core.models import TimeStampedModel
from apps.core.validators import validate_currency_code


class Property(TimeStampedModel):
    PROPERTY_TYPE_CHOICES = [
        ("single_family", "Single Family"),
        ("multi_family", "Multi Family"),
        ("apartment", "Apartment Complex"),
        ("condo", "Condominium"),
        ("townhouse", "Townhouse"),
    ]

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="properties"
    )
    name = models.CharField(max_length=200)
    property_type = models.CharField(
        max_length=20, choices=PROPERTY_TYPE_CHOICES, default="apartment"
    )
    address_line1 = models.CharField(max_length=255)
    address_line2 = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=50, blank=True, default="")
    zip_code = models.CharField(max_length=10, blank=True, default="")
    country = models.CharField(max_length=2, default="US")
    description = models.TextField(blank=True, default="")

    class Meta:
        verbose_name_plural = "Properties"
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def full_address(self):
        parts = [self.address_line1]
        if self.address_line2:
            parts.append(self.address_line2)
        parts.append(f"{self.city}, {self.state} {self.zip_code}".strip().rstrip(","))
        return ", ".join(parts)


class Unit(TimeStampedModel):
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="units")
    unit_number = models.CharField(max_length=20)
    bedrooms = models.PositiveSmallIntegerField(default=1)
    bathrooms = models.DecimalField(max_digits=3, decimal_places=1, default=1.0)
    square_feet = models.PositiveIntegerField(null=True, blank=True)
    monthly_rent = models.DecimalField(max_digits=10, decimal_places=2)
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, default="USD", validators=[validate_currency_code])
    # Leased units are never available; availability returns only when the lease terminates.
    is_available = models.BooleanField(default=True, db_index=True)
    is_visible = models.BooleanField(default=True, db_index=True)
    description = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["property", "unit_number"]
        unique_together = [("property", "unit_number")]

    def __str__(self):
        return f"{self.property.name} - Unit {self.unit_number}"

    # The "property" field shadows the builtin inside this class body
    @builtins.property
    def landlord(self):
        return self.property.owner

    @builtins.property
    def is_listed(self):
        return self.is_available and self.is_visible
