import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import apps.core.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("property_type", models.CharField(choices=[("single_family", "Single Family"), ("multi_family", "Multi Family"), ("apartment", "Apartment Complex"), ("condo", "Condominium"), ("townhouse", "Townhouse")], default="apartment", max_length=20)),
                ("address_line1", models.CharField(max_length=255)),
                ("address_line2", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(max_length=100)),
                ("state", models.CharField(blank=True, default="", max_length=50)),
                ("zip_code", models.CharField(blank=True, default="", max_length=10)),
                ("country", models.CharField(default="US", max_length=2)),
                ("description", models.TextField(blank=True, default="")),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="properties", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name_plural": "Properties",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Unit",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("unit_number", models.CharField(max_length=20)),
                ("bedrooms", models.PositiveSmallIntegerField(default=1)),
                ("bathrooms", models.DecimalField(decimal_places=1, default=1.0, max_digits=3)),
                ("square_feet", models.PositiveIntegerField(blank=True, null=True)),
                ("monthly_rent", models.DecimalField(decimal_places=2, max_digits=10)),
                ("security_deposit", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("currency", models.CharField(default="USD", max_length=3, validators=[apps.core.validators.validate_currency_code])),
                ("is_available", models.BooleanField(db_index=True, default=True)),
                ("is_visible", models.BooleanField(db_index=True, default=True)),
                ("description", models.TextField(blank=True, default="")),
                ("property", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="units", to="properties.property")),
            ],
            options={
                "ordering": ["property", "unit_number"],
                "unique_together": {("property", "unit_number")},
            },
        ),
    ]
