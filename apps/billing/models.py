from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

from apps.core.models import TimeStampedModel


class Payment(TimeStampedModel):
    TYPE_MOVE_IN = "move_in"
    TYPE_RENT = "rent"
    TYPE_OTHER = "other"
    TYPE_CHOICES = [
        (TYPE_MOVE_IN, "Move-in"),
        (TYPE_RENT, "Rent"),
        (TYPE_OTHER, "Other"),
    ]
    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_FAILED, "Failed"),
    ]

    lease = models.ForeignKey(
        "leases.Lease", on_delete=models.PROTECT, related_name="payments"
    )
    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="payments"
    )
    unit = models.ForeignKey(
        "properties.Unit", on_delete=models.PROTECT, related_name="payments"
    )
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_RENT)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, default="USD")
    status = models.CharField(
        max_length=15, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True
    )
    due_date = models.DateField()
    paid_at = models.DateTimeField(null=True, blank=True)
    # Move-in payments record {"rentAmount": "...", "securityDeposit": "..."}
    notes = models.JSONField(default=dict, blank=True)

    # Split computed when checkout starts
    platform_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    landlord_payout = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Processor references
    checkout_session_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    payment_intent_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    transfer_id = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        ordering = ["-due_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["lease"],
                condition=Q(type="move_in"),
                name="unique_move_in_payment_per_lease",
            ),
            models.UniqueConstraint(
                fields=["lease", "due_date"],
                condition=Q(type="rent"),
                name="unique_rent_payment_per_due_date",
            ),
        ]

    def __str__(self):
        return f"Payment {self.amount} {self.currency} by {self.tenant} ({self.status})"

    @property
    def rent_portion(self):
        """Amount subject to the platform fee."""
        if self.type == self.TYPE_MOVE_IN and self.notes.get("rentAmount"):
            return Decimal(self.notes["rentAmount"])
        return self.amount

    @property
    def deposit_portion(self):
        if self.type == self.TYPE_MOVE_IN:
            return Decimal(self.notes.get("securityDeposit") or "0")
        return Decimal("0")
