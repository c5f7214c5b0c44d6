from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "recipient", "recipient_email", "type", "channel", "is_read", "sent_at")
    list_filter = ("type", "channel", "is_read")
    search_fields = ("title", "recipient__email", "recipient_email")
    raw_id_fields = ("recipient",)
