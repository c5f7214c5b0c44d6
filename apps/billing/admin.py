from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("tenant", "unit", "type", "amount", "currency", "status", "due_date", "paid_at")
    list_filter = ("type", "status", "currency")
    search_fields = ("tenant__email", "checkout_session_id", "payment_intent_id")
    raw_id_fields = ("lease", "tenant", "unit")
    readonly_fields = (
        "platform_fee", "landlord_payout", "checkout_session_id",
        "payment_intent_id", "transfer_id", "paid_at",
    )
