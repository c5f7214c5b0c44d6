from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import TenantProfile, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "first_name", "last_name", "roles", "is_active")
    list_filter = ("is_active", "is_staff")
    search_fields = ("username", "email", "first_name", "last_name", "phone_number")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Tenancy", {
            "fields": (
                "roles",
                "phone_number",
                "stripe_customer_id",
                "stripe_connected_account_id",
                "stripe_connected_account_status",
            ),
        }),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Tenancy", {
            "fields": ("roles", "email", "first_name", "last_name", "phone_number"),
        }),
    )


@admin.register(TenantProfile)
class TenantProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "employer_name", "emergency_contact_name", "move_in_date")
    search_fields = ("user__username", "user__email", "user__first_name", "user__last_name")
    readonly_fields = ("ssn_last_four",)
