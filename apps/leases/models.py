from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import TimeStampedModel


class Lease(TimeStampedModel):
    STATUS_ACTIVE = "active"
    STATUS_NOTICE_GIVEN = "notice_given"
    STATUS_TERMINATED = "terminated"
    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_NOTICE_GIVEN, "Notice Given"),
        (STATUS_TERMINATED, "Terminated"),
    ]
    # Statuses in which the tenant still occupies the unit
    OCCUPIED_STATUSES = (STATUS_ACTIVE, STATUS_NOTICE_GIVEN)

    unit = models.ForeignKey(
        "properties.Unit", on_delete=models.PROTECT, related_name="leases"
    )
    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="leases",
    )
    landlord = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="landlord_leases",
    )
    status = models.CharField(
        max_length=15, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True
    )
    lease_start = models.DateField()
    lease_end = models.DateField()

    monthly_rent = models.DecimalField(max_digits=10, decimal_places=2)
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, default="USD")
    rent_due_day = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(31)],
        help_text="Day of month rent is due; clamped to short months",
    )
    terminated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-lease_start"]

    def __str__(self):
        return f"Lease: {self.tenant} @ {self.unit} ({self.status})"

    @property
    def is_active(self):
        return self.status == self.STATUS_ACTIVE

    @property
    def is_occupied(self):
        return self.status in self.OCCUPIED_STATUSES

    def party_role(self, user):
        """Return "tenant" or "landlord" for a party to this lease, else None."""
        if user is None:
            return None
        if user.pk == self.tenant_id:
            return "tenant"
        if user.pk == self.landlord_id:
            return "landlord"
        return None
