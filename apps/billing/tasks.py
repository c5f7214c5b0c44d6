"""
Django-Q2 async tasks for the billing app.

Schedule these via Django-Q2 admin or programmatically:
    from django_q.tasks import schedule
    schedule('apps.billing.tasks.generate_rent_payments', schedule_type='D')
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from apps.core.dates import add_months, clamp_day

logger = logging.getLogger(__name__)


def next_due_date(lease, today):
    """First rent due date on or after ``today`` for the lease's due day."""
    due = clamp_day(today.year, today.month, lease.rent_due_day)
    if due < today:
        following = add_months(today.replace(day=1), 1)
        due = clamp_day(following.year, following.month, lease.rent_due_day)
    return due


def generate_rent_payments(today=None):
    """
    Create rent payments for occupied leases whose next due date falls
    within RENT_BILLING_WINDOW_DAYS.

    Called daily by a Django-Q2 schedule. Safe to run repeatedly: a rent
    payment is created at most once per lease and due date.

    Returns:
        dict with created and skipped counts.
    """
    from apps.leases.models import Lease

    from .services import PaymentOrchestrator

    today = today or timezone.localdate()
    window_end = today + timedelta(days=settings.RENT_BILLING_WINDOW_DAYS)
    results = {"created": 0, "skipped": 0}

    leases = Lease.objects.filter(status__in=Lease.OCCUPIED_STATUSES).select_related("tenant", "unit")
    for lease in leases:
        due = next_due_date(lease, today)
        # The move-in payment covers the first month; stop billing after the lease ends.
        if due > window_end or due <= lease.lease_start or due > lease.lease_end:
            results["skipped"] += 1
            continue
        if PaymentOrchestrator.create_rent_payment(lease, due):
            results["created"] += 1
        else:
            results["skipped"] += 1

    logger.info("Rent generation for %s: %s", today, results)
    return results
