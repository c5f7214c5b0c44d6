"""
Tenant Lifecycle Models.

Models for the path a tenant takes through a unit:
- Tenancy applications and the landlord's decision
- Token-addressed invitations and onboarding progress
- Offboarding notices, inspection and deposit disposition
"""

import secrets
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.core.models import TimeStampedModel


def generate_access_token():
    """Generate a secure 48-character access token."""
    return secrets.token_urlsafe(36)


def default_invitation_expiry():
    return timezone.now() + timedelta(days=settings.INVITATION_EXPIRY_DAYS)


# =============================================================================
# Applications
# =============================================================================


class TenancyApplication(TimeStampedModel):
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_WITHDRAWN = "withdrawn"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_WITHDRAWN, "Withdrawn"),
    ]

    applicant = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tenancy_applications"
    )
    unit = models.ForeignKey(
        "properties.Unit", on_delete=models.CASCADE, related_name="applications"
    )
    status = models.CharField(
        max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True
    )
    application_data = models.JSONField(default=dict)
    submitted_at = models.DateTimeField(default=timezone.now)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_applications",
    )
    decision_notes = models.TextField(blank=True, default="")
    # One lease per approved application
    lease = models.OneToOneField(
        "leases.Lease",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="application",
    )

    class Meta:
        ordering = ["-submitted_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["applicant", "unit"],
                condition=Q(status="pending"),
                name="unique_pending_application_per_unit",
            ),
        ]

    def __str__(self):
        return f"Application by {self.applicant} for {self.unit} ({self.status})"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING


# =============================================================================
# Onboarding
# =============================================================================


class TenantInvitation(TimeStampedModel):
    """
    Bearer-token invitation to complete onboarding for a unit.

    Possession of the token grants read/write access to the onboarding
    answers; completion additionally requires the invitee's verified identity.
    """

    token = models.CharField(
        max_length=64, unique=True, default=generate_access_token, editable=False
    )
    tenant_email = models.EmailField()
    tenant_name = models.CharField(max_length=200, blank=True, default="")
    unit = models.ForeignKey(
        "properties.Unit", on_delete=models.CASCADE, related_name="invitations"
    )
    landlord = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_invitations"
    )
    # Set at approval; direct invitations get their lease when onboarding completes.
    lease = models.ForeignKey(
        "leases.Lease",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invitations",
    )
    application = models.OneToOneField(
        TenancyApplication,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invitation",
    )
    rent_due_day = models.PositiveSmallIntegerField(default=1)
    expires_at = models.DateTimeField(default=default_invitation_expiry)
    accepted_at = models.DateTimeField(null=True, blank=True)
    tenant_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="accepted_invitations",
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Invitation for {self.tenant_email} to {self.unit}"

    @property
    def is_accepted(self):
        return self.accepted_at is not None

    @property
    def is_expired(self):
        return timezone.now() > self.expires_at

    @property
    def status(self):
        if self.is_accepted:
            return "accepted"
        if self.is_expired:
            return "expired"
        return "sent"


class OnboardingProgress(TimeStampedModel):
    STATUS_NOT_STARTED = "not_started"
    STATUS_IN_PROGRESS = "in_progress"
    STATUS_COMPLETED = "completed"
    STATUS_CHOICES = [
        (STATUS_NOT_STARTED, "Not Started"),
        (STATUS_IN_PROGRESS, "In Progress"),
        (STATUS_COMPLETED, "Completed"),
    ]

    STEPS = [
        "personal",
        "employment",
        "proof_of_address",
        "emergency_contact",
        "photo_id",
        "review",
    ]
    REQUIRED_STEPS = ["personal", "employment", "proof_of_address", "emergency_contact", "photo_id"]

    invitation = models.OneToOneField(
        TenantInvitation, on_delete=models.CASCADE, related_name="progress"
    )
    status = models.CharField(
        max_length=15, choices=STATUS_CHOICES, default=STATUS_NOT_STARTED, db_index=True
    )
    current_step = models.PositiveSmallIntegerField(default=1)
    completed_steps = models.JSONField(default=list, blank=True)
    data = models.JSONField(default=dict, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name_plural = "Onboarding progress"

    def __str__(self):
        return f"Onboarding for {self.invitation.tenant_email} ({self.status})"

    @property
    def missing_steps(self):
        return [step for step in self.REQUIRED_STEPS if not self.data.get(step)]

    def mark_step_complete(self, step_name):
        if step_name not in self.completed_steps:
            self.completed_steps = list(self.completed_steps) + [step_name]

    def get_progress_percent(self):
        done = len([s for s in self.STEPS if s in self.completed_steps])
        return int(done / len(self.STEPS) * 100)


# =============================================================================
# Offboarding
# =============================================================================


class OffboardingNotice(TimeStampedModel):
    STATUS_ACTIVE = "active"
    STATUS_INSPECTION_SCHEDULED = "inspection_scheduled"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INSPECTION_SCHEDULED, "Inspection Scheduled"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]
    OPEN_STATUSES = (STATUS_ACTIVE, STATUS_INSPECTION_SCHEDULED)

    INITIATED_BY_CHOICES = [
        ("tenant", "Tenant"),
        ("landlord", "Landlord"),
    ]
    DEPOSIT_STATUS_CHOICES = [
        ("pending", "Pending"),
        ("returned", "Returned"),
        ("partial", "Partially Returned"),
        ("withheld", "Withheld"),
    ]

    lease = models.ForeignKey(
        "leases.Lease", on_delete=models.CASCADE, related_name="offboarding_notices"
    )
    initiated_by = models.CharField(max_length=10, choices=INITIATED_BY_CHOICES)
    initiated_by_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="offboarding_notices_given",
    )
    status = models.CharField(
        max_length=25, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True
    )
    notice_date = models.DateField(default=timezone.localdate)
    move_out_date = models.DateField()
    reason = models.TextField(blank=True, default="")

    inspection_date = models.DateField(null=True, blank=True)
    inspection_notes = models.TextField(blank=True, default="")
    inspection_completed = models.BooleanField(default=False)

    deposit_status = models.CharField(
        max_length=10, choices=DEPOSIT_STATUS_CHOICES, default="pending"
    )
    deposit_notes = models.TextField(blank=True, default="")

    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="offboarding_notices_cancelled",
    )
    cancellation_reason = models.TextField(blank=True, default="")
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["lease"],
                condition=Q(status__in=["active", "inspection_scheduled"]),
                name="unique_open_notice_per_lease",
            ),
        ]

    def __str__(self):
        return f"Notice on {self.lease} by {self.initiated_by} ({self.status})"

    @property
    def is_open(self):
        return self.status in self.OPEN_STATUSES
