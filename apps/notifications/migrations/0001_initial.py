import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("recipient_email", models.EmailField(blank=True, default="", max_length=254)),
                ("type", models.CharField(choices=[("application_received", "Application Received"), ("application_approved", "Application Approved"), ("application_rejected", "Application Rejected"), ("tenant_invitation", "Tenant Invitation"), ("onboarding_completed", "Onboarding Completed"), ("payment_received", "Payment Received"), ("payment_failed", "Payment Failed"), ("notice_given", "Notice Given"), ("notice_cancelled", "Notice Cancelled"), ("inspection_scheduled", "Inspection Scheduled"), ("offboarding_completed", "Offboarding Completed"), ("system", "System")], db_index=True, default="system", max_length=30)),
                ("channel", models.CharField(choices=[("in_app", "In-App"), ("email", "Email")], default="email", max_length=10)),
                ("title", models.CharField(max_length=255)),
                ("message", models.TextField()),
                ("data", models.JSONField(blank=True, default=dict)),
                ("action_url", models.CharField(blank=True, default="", max_length=500)),
                ("is_read", models.BooleanField(db_index=True, default=False)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("recipient", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
