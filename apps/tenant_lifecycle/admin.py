from django.contrib import admin

from .models import OffboardingNotice, OnboardingProgress, TenancyApplication, TenantInvitation


@admin.register(TenancyApplication)
class TenancyApplicationAdmin(admin.ModelAdmin):
    list_display = ("applicant", "unit", "status", "submitted_at", "reviewed_at")
    list_filter = ("status",)
    search_fields = ("applicant__email", "unit__unit_number", "unit__property__name")
    raw_id_fields = ("applicant", "unit", "reviewed_by", "lease")
    readonly_fields = ("submitted_at", "reviewed_at")


class OnboardingProgressInline(admin.StackedInline):
    model = OnboardingProgress
    extra = 0
    readonly_fields = ("status", "current_step", "completed_steps", "started_at", "completed_at")


@admin.register(TenantInvitation)
class TenantInvitationAdmin(admin.ModelAdmin):
    list_display = ("tenant_email", "unit", "expires_at", "accepted_at")
    search_fields = ("tenant_email", "tenant_name", "unit__unit_number")
    raw_id_fields = ("unit", "landlord", "lease", "application", "tenant_user")
    readonly_fields = ("token", "accepted_at")
    inlines = [OnboardingProgressInline]


@admin.register(OffboardingNotice)
class OffboardingNoticeAdmin(admin.ModelAdmin):
    list_display = ("lease", "initiated_by", "status", "move_out_date", "inspection_date", "deposit_status")
    list_filter = ("status", "initiated_by", "deposit_status")
    raw_id_fields = ("lease", "initiated_by_user", "cancelled_by")
