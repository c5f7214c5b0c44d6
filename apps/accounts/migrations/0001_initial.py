import uuid

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import apps.core.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("username", models.CharField(error_messages={"unique": "A user with that username already exists."}, help_text="Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.", max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name="username")),
                ("first_name", models.CharField(blank=True, max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=150, verbose_name="last name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email address")),
                ("is_staff", models.BooleanField(default=False, help_text="Designates whether the user can log into this admin site.", verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, help_text="Designates whether this user should be treated as active. Unselect this instead of deleting accounts.", verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("roles", models.JSONField(blank=True, default=list)),
                ("phone_number", models.CharField(blank=True, default="", max_length=20, validators=[apps.core.validators.validate_phone_number])),
                ("stripe_customer_id", models.CharField(blank=True, default="", max_length=255)),
                ("stripe_connected_account_id", models.CharField(blank=True, default="", max_length=255)),
                ("stripe_connected_account_status", models.CharField(blank=True, choices=[("", "Not started"), ("pending", "Pending"), ("complete", "Complete")], default="", max_length=10)),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "ordering": ["last_name", "first_name"],
            },
            managers=[
                ("objects", django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="TenantProfile",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("ssn_last_four", models.CharField(blank=True, default="", max_length=4)),
                ("drivers_license_state", models.CharField(blank=True, default="", max_length=2)),
                ("drivers_license_number", models.CharField(blank=True, default="", max_length=50)),
                ("employer_name", models.CharField(blank=True, default="", max_length=200)),
                ("employment_type", models.CharField(blank=True, default="", max_length=30)),
                ("job_title", models.CharField(blank=True, default="", max_length=200)),
                ("annual_income", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("emergency_contact_name", models.CharField(blank=True, default="", max_length=200)),
                ("emergency_contact_relationship", models.CharField(blank=True, default="", max_length=100)),
                ("emergency_contact_phone", models.CharField(blank=True, default="", max_length=20, validators=[apps.core.validators.validate_phone_number])),
                ("emergency_contact_email", models.EmailField(blank=True, default="", max_length=254)),
                ("proof_of_address_url", models.URLField(blank=True, default="", max_length=500)),
                ("photo_id_url", models.URLField(blank=True, default="", max_length=500)),
                ("move_in_date", models.DateField(blank=True, null=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="tenant_profile", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
    ]
