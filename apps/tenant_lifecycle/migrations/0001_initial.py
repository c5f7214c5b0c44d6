import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import apps.tenant_lifecycle.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("leases", "0001_initial"),
        ("properties", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TenancyApplication",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected"), ("withdrawn", "Withdrawn")], db_index=True, default="pending", max_length=10)),
                ("application_data", models.JSONField(default=dict)),
                ("submitted_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("decision_notes", models.TextField(blank=True, default="")),
                ("applicant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="tenancy_applications", to=settings.AUTH_USER_MODEL)),
                ("lease", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="application", to="leases.lease")),
                ("reviewed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reviewed_applications", to=settings.AUTH_USER_MODEL)),
                ("unit", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to="properties.unit")),
            ],
            options={
                "ordering": ["-submitted_at"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("status", "pending")), fields=("applicant", "unit"), name="unique_pending_application_per_unit"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TenantInvitation",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("token", models.CharField(default=apps.tenant_lifecycle.models.generate_access_token, editable=False, max_length=64, unique=True)),
                ("tenant_email", models.EmailField(max_length=254)),
                ("tenant_name", models.CharField(blank=True, default="", max_length=200)),
                ("rent_due_day", models.PositiveSmallIntegerField(default=1)),
                ("expires_at", models.DateTimeField(default=apps.tenant_lifecycle.models.default_invitation_expiry)),
                ("accepted_at", models.DateTimeField(blank=True, null=True)),
                ("application", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="invitation", to="tenant_lifecycle.tenancyapplication")),
                ("landlord", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sent_invitations", to=settings.AUTH_USER_MODEL)),
                ("lease", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="invitations", to="leases.lease")),
                ("tenant_user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="accepted_invitations", to=settings.AUTH_USER_MODEL)),
                ("unit", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="invitations", to="properties.unit")),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="OnboardingProgress",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("status", models.CharField(choices=[("not_started", "Not Started"), ("in_progress", "In Progress"), ("completed", "Completed")], db_index=True, default="not_started", max_length=15)),
                ("current_step", models.PositiveSmallIntegerField(default=1)),
                ("completed_steps", models.JSONField(blank=True, default=list)),
                ("data", models.JSONField(blank=True, default=dict)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("invitation", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="progress", to="tenant_lifecycle.tenantinvitation")),
            ],
            options={
                "verbose_name_plural": "Onboarding progress",
            },
        ),
        migrations.CreateModel(
            name="OffboardingNotice",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("initiated_by", models.CharField(choices=[("tenant", "Tenant"), ("landlord", "Landlord")], max_length=10)),
                ("status", models.CharField(choices=[("active", "Active"), ("inspection_scheduled", "Inspection Scheduled"), ("completed", "Completed"), ("cancelled", "Cancelled")], db_index=True, default="active", max_length=25)),
                ("notice_date", models.DateField(default=django.utils.timezone.localdate)),
                ("move_out_date", models.DateField()),
                ("reason", models.TextField(blank=True, default="")),
                ("inspection_date", models.DateField(blank=True, null=True)),
                ("inspection_notes", models.TextField(blank=True, default="")),
                ("inspection_completed", models.BooleanField(default=False)),
                ("deposit_status", models.CharField(choices=[("pending", "Pending"), ("returned", "Returned"), ("partial", "Partially Returned"), ("withheld", "Withheld")], default="pending", max_length=10)),
                ("deposit_notes", models.TextField(blank=True, default="")),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason", models.TextField(blank=True, default="")),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="offboarding_notices_cancelled", to=settings.AUTH_USER_MODEL)),
                ("initiated_by_user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="offboarding_notices_given", to=settings.AUTH_USER_MODEL)),
                ("lease", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="offboarding_notices", to="leases.lease")),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("status__in", ["active", "inspection_scheduled"])), fields=("lease",), name="unique_open_notice_per_lease"),
                ],
            },
        ),
    ]
