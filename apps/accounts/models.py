import uuid

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

from apps.core.models import TimeStampedModel
from apps.core.validators import validate_phone_number


class User(AbstractUser):
    ROLE_TENANT = "tenant"
    ROLE_LANDLORD = "landlord"
    ROLE_ADMIN = "admin"
    ROLE_CHOICES = [
        (ROLE_TENANT, "Tenant"),
        (ROLE_LANDLORD, "Landlord"),
        (ROLE_ADMIN, "Admin"),
    ]
    CONNECT_STATUS_CHOICES = [
        ("", "Not started"),
        ("pending", "Pending"),
        ("complete", "Complete"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # A user can hold several roles at once, e.g. a landlord who also rents.
    roles = models.JSONField(default=list, blank=True)
    phone_number = models.CharField(
        max_length=20, blank=True, default="", validators=[validate_phone_number]
    )

    # Payment processor references
    stripe_customer_id = models.CharField(max_length=255, blank=True, default="")
    stripe_connected_account_id = models.CharField(max_length=255, blank=True, default="")
    stripe_connected_account_status = models.CharField(
        max_length=10, choices=CONNECT_STATUS_CHOICES, blank=True, default=""
    )

    class Meta:
        ordering = ["last_name", "first_name"]

    def __str__(self):
        return self.get_full_name() or self.username

    def has_role(self, role):
        return role in (self.roles or [])

    @property
    def is_tenant(self):
        return self.has_role(self.ROLE_TENANT)

    @property
    def is_landlord(self):
        return self.has_role(self.ROLE_LANDLORD)

    @property
    def is_admin_user(self):
        return self.has_role(self.ROLE_ADMIN) or self.is_superuser


class TenantProfile(TimeStampedModel):
    """Identity and screening data captured during application or onboarding."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tenant_profile"
    )

    date_of_birth = models.DateField(null=True, blank=True)
    # The full SSN is never persisted.
    ssn_last_four = models.CharField(max_length=4, blank=True, default="")
    drivers_license_state = models.CharField(max_length=2, blank=True, default="")
    drivers_license_number = models.CharField(max_length=50, blank=True, default="")

    employer_name = models.CharField(max_length=200, blank=True, default="")
    employment_type = models.CharField(max_length=30, blank=True, default="")
    job_title = models.CharField(max_length=200, blank=True, default="")
    annual_income = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    emergency_contact_name = models.CharField(max_length=200, blank=True, default="")
    emergency_contact_relationship = models.CharField(max_length=100, blank=True, default="")
    emergency_contact_phone = models.CharField(
        max_length=20, blank=True, default="", validators=[validate_phone_number]
    )
    emergency_contact_email = models.EmailField(blank=True, default="")

    proof_of_address_url = models.URLField(max_length=500, blank=True, default="")
    photo_id_url = models.URLField(max_length=500, blank=True, default="")

    move_in_date = models.DateField(null=True, blank=True)

    def __str__(self):
        return f"Tenant Profile: {self.user}"

    @property
    def masked_ssn(self):
        return f"***-**-{self.ssn_last_four}" if self.ssn_last_four else ""
