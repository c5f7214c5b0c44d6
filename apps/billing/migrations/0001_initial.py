import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("leases", "0001_initial"),
        ("properties", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("type", models.CharField(choices=[("move_in", "Move-in"), ("rent", "Rent"), ("other", "Other")], default="rent", max_length=10)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("processing", "Processing"), ("completed", "Completed"), ("failed", "Failed")], db_index=True, default="pending", max_length=15)),
                ("due_date", models.DateField()),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.JSONField(blank=True, default=dict)),
                ("platform_fee", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("landlord_payout", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("checkout_session_id", models.CharField(blank=True, db_index=True, default="", max_length=255)),
                ("payment_intent_id", models.CharField(blank=True, db_index=True, default="", max_length=255)),
                ("transfer_id", models.CharField(blank=True, default="", max_length=255)),
                ("lease", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="leases.lease")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to=settings.AUTH_USER_MODEL)),
                ("unit", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="properties.unit")),
            ],
            options={
                "ordering": ["-due_date"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("type", "move_in")), fields=("lease",), name="unique_move_in_payment_per_lease"),
                    models.UniqueConstraint(condition=models.Q(("type", "rent")), fields=("lease", "due_date"), name="unique_rent_payment_per_due_date"),
                ],
            },
        ),
    ]
