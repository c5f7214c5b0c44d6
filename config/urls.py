from django.contrib import admin
from django.urls import include, path

from apps.core.views import health_check, liveness_check

urlpatterns = [
    # Health check endpoints for container orchestration
    path("health/", health_check, name="health_check"),
    path("live/", liveness_check, name="liveness_check"),
    # Django admin
    path("django-admin/", admin.site.urls),
    path("api/", include(("apps.tenant_lifecycle.urls_applications", "applications"), namespace="applications")),
    path("api/onboarding/", include(("apps.tenant_lifecycle.urls_onboarding", "tenant_lifecycle"), namespace="onboarding")),
    path("api/offboarding/", include(("apps.tenant_lifecycle.urls_offboarding", "tenant_lifecycle"), namespace="offboarding")),
    path("api/admin/", include(("apps.tenant_lifecycle.urls_admin", "tenant_lifecycle"), namespace="lifecycle_admin")),
    path("api/admin/", include(("apps.billing.urls_admin", "billing"), namespace="billing_admin")),
    path("api/", include(("apps.billing.urls_api", "billing"), namespace="billing")),
    path("webhooks/", include(("apps.billing.urls_webhooks", "billing"), namespace="billing_webhooks")),
]
