from django.conf import settings
from django.db import models

from apps.core.models import TimeStampedModel


class Notification(TimeStampedModel):
    CHANNEL_CHOICES = [
        ("in_app", "In-App"),
        ("email", "Email"),
    ]
    TYPE_CHOICES = [
        ("application_received", "Application Received"),
        ("application_approved", "Application Approved"),
        ("application_rejected", "Application Rejected"),
        ("tenant_invitation", "Tenant Invitation"),
        ("onboarding_completed", "Onboarding Completed"),
        ("payment_received", "Payment Received"),
        ("payment_failed", "Payment Failed"),
        ("notice_given", "Notice Given"),
        ("notice_cancelled", "Notice Cancelled"),
        ("inspection_scheduled", "Inspection Scheduled"),
        ("offboarding_completed", "Offboarding Completed"),
        ("system", "System"),
    ]

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    # Invitees may not have an account yet
    recipient_email = models.EmailField(blank=True, default="")
    type = models.CharField(max_length=30, choices=TYPE_CHOICES, default="system", db_index=True)
    channel = models.CharField(max_length=10, choices=CHANNEL_CHOICES, default="email")
    title = models.CharField(max_length=255)
    message = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    action_url = models.CharField(max_length=500, blank=True, default="")
    is_read = models.BooleanField(default=False, db_index=True)
    sent_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} -> {self.recipient or self.recipient_email}"

    @property
    def email_address(self):
        if self.recipient_id and self.recipient.email:
            return self.recipient.email
        return self.recipient_email
