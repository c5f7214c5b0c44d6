"""
Lease provisioning and activation.

``provision_lease`` is called inside the approval transaction.
``activate_tenancy`` binds an onboarded user as tenant of record and is called
exactly once per invitation, inside the onboarding completion transaction.
"""

import logging

from django.conf import settings
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import grant_role, persist_tenant_profile
from apps.core.dates import add_months
from apps.core.exceptions import ConflictError
from apps.properties.models import Unit

from .models import Lease

logger = logging.getLogger(__name__)


def claim_unit(unit):
    """Mark the unit leased, failing if another lease already holds it."""
    claimed = Unit.objects.filter(pk=unit.pk, is_available=True).update(
        is_available=False, is_visible=False, updated_at=timezone.now()
    )
    if not claimed:
        raise ConflictError(f"Unit {unit.unit_number} is already leased.")
    unit.is_available = False
    unit.is_visible = False


def release_unit(unit):
    """Make a unit available again once its lease has terminated.

    The unit stays hidden from search until the landlord relists it.
    """
    Unit.objects.filter(pk=unit.pk).update(
        is_available=True, is_visible=False, updated_at=timezone.now()
    )
    unit.is_available = True
    unit.is_visible = False


def provision_lease(unit, tenant, rent_due_day=1, start_date=None):
    """Create an active lease on ``unit`` using the unit's current terms."""
    claim_unit(unit)
    start = start_date or timezone.localdate()
    lease = Lease.objects.create(
        unit=unit,
        tenant=tenant,
        landlord=unit.property.owner,
        status=Lease.STATUS_ACTIVE,
        lease_start=start,
        lease_end=add_months(start, settings.LEASE_TERM_MONTHS),
        monthly_rent=unit.monthly_rent,
        security_deposit=unit.security_deposit,
        currency=unit.currency,
        rent_due_day=rent_due_day,
    )
    logger.info(
        "Provisioned lease %s for %s at unit %s (%s-%s)",
        lease.pk, tenant.email, unit.pk, lease.lease_start, lease.lease_end,
    )
    return lease


def activate_tenancy(invitation, user, sections):
    """
    Make ``user`` the tenant of record for the invitation's tenancy.

    Invitations issued on approval already carry a lease; direct invitations get
    one provisioned here together with their move-in payment.
    """
    from apps.billing.services import PaymentOrchestrator

    lease = invitation.lease
    if lease is None:
        lease = provision_lease(
            invitation.unit, user, rent_due_day=invitation.rent_due_day
        )
        PaymentOrchestrator.create_move_in_payment(lease)
        invitation.lease = lease
        invitation.save(update_fields=["lease", "updated_at"])
    elif lease.tenant_id != user.pk:
        lease.tenant = user
        lease.save(update_fields=["tenant", "updated_at"])
        lease.payments.exclude(status="completed").update(tenant=user)

    grant_role(user, User.ROLE_TENANT)
    persist_tenant_profile(user, sections, move_in_date=lease.lease_start)
    logger.info("Activated tenancy: user %s on lease %s", user.pk, lease.pk)
    return lease
