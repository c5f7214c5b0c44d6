from django.contrib import admin

from .models import Property, Unit


class UnitInline(admin.TabularInline):
    model = Unit
    extra = 0
    fields = ("unit_number", "monthly_rent", "security_deposit", "currency", "is_available", "is_visible")


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "city", "property_type")
    list_filter = ("property_type", "city")
    search_fields = ("name", "address_line1", "city", "owner__email")
    inlines = [UnitInline]


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ("__str__", "monthly_rent", "currency", "is_available", "is_visible")
    list_filter = ("is_available", "is_visible", "currency", "property")
    search_fields = ("unit_number", "property__name")
