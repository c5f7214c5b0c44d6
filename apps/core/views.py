"""
Health endpoints for the container orchestrator and uptime monitors.
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)

CACHE_PROBE_KEY = "lifecycle:health"


def _check_database():
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _check_cache():
    # Goes through the configured backend: Redis when REDIS_URL is set, the
    # database cache table otherwise.
    cache.set(CACHE_PROBE_KEY, "ok", timeout=5)
    if cache.get(CACHE_PROBE_KEY) != "ok":
        raise RuntimeError("cache read-back mismatch")


CHECKS = (
    ("database", _check_database),
    ("cache", _check_cache),
)


def health_check(request):
    """Readiness: 200 when the database and cache answer, 503 otherwise."""
    checks = {}
    healthy = True
    for name, check in CHECKS:
        try:
            check()
            checks[name] = "ok"
        except Exception as e:
            logger.exception("Health check %s failed", name)
            checks[name] = f"error: {type(e).__name__}"
            healthy = False

    # Reported, not checked: a misconfigured gateway only breaks online payments.
    checks["payment_gateway"] = settings.PAYMENT_GATEWAY_BACKEND.rsplit(".", 1)[-1]

    return JsonResponse(
        {"status": "healthy" if healthy else "unhealthy", "checks": checks},
        status=200 if healthy else 503,
    )


def liveness_check(request):
    return JsonResponse({"status": "alive"})
