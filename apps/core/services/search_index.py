"""
Listing search index client.

Unit availability changes are pushed to the external search index after the
database transaction commits. Delivery is best effort: a failed push is logged
and never undoes the change that triggered it.
"""

import logging

import requests
from django.conf import settings
from django.db import transaction

logger = logging.getLogger(__name__)


def _unit_document(unit):
    prop = unit.property
    return {
        "id": str(unit.pk),
        "property_id": str(prop.pk),
        "property_name": prop.name,
        "unit_number": unit.unit_number,
        "city": prop.city,
        "monthly_rent": str(unit.monthly_rent),
        "currency": unit.currency,
        "is_available": unit.is_available,
        "is_visible": unit.is_visible,
    }


def push_unit(unit_id):
    """Send the current state of a unit to the index. Returns True on success."""
    from apps.properties.models import Unit

    url = settings.SEARCH_INDEX_URL
    if not url:
        logger.debug("SEARCH_INDEX_URL not set; skipping index update for unit %s", unit_id)
        return False

    try:
        unit = Unit.objects.select_related("property").get(pk=unit_id)
    except Unit.DoesNotExist:
        logger.warning("Unit %s vanished before its index update", unit_id)
        return False

    headers = {}
    if settings.SEARCH_INDEX_API_KEY:
        headers["Authorization"] = f"Bearer {settings.SEARCH_INDEX_API_KEY}"

    try:
        resp = requests.post(
            f"{url.rstrip('/')}/units/{unit.pk}",
            json=_unit_document(unit),
            headers=headers,
            timeout=10,
        )
        resp.raise_for_status()
        logger.info("Search index updated for unit %s (status %s)", unit.pk, resp.status_code)
        return True
    except Exception:
        logger.exception("Search index update failed for unit %s", unit.pk)
        return False


def queue_push(unit_id):
    try:
        from django_q.tasks import async_task

        async_task(
            "apps.core.services.search_index.push_unit",
            str(unit_id),
            task_name=f"search-index-{unit_id}",
        )
    except Exception:
        logger.warning("Django-Q2 unavailable; pushing unit %s to the index synchronously.", unit_id)
        push_unit(unit_id)


def sync_unit_on_commit(unit_id):
    """Queue an index push for the unit once the current transaction commits."""
    transaction.on_commit(lambda: queue_push(unit_id))
