from django.contrib import admin

from .models import Lease


@admin.register(Lease)
class LeaseAdmin(admin.ModelAdmin):
    list_display = ("tenant", "unit", "status", "lease_start", "lease_end", "monthly_rent", "currency")
    list_filter = ("status", "currency")
    search_fields = ("tenant__email", "landlord__email", "unit__unit_number", "unit__property__name")
    raw_id_fields = ("tenant", "landlord", "unit")
    readonly_fields = ("terminated_at",)
