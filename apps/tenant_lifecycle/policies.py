"""
Capability checks for lifecycle actions.

Each function answers whether ``user`` may perform an action on a record.
Services raise ForbiddenError when a check fails.
"""


def owns_unit(user, unit):
    return user is not None and unit.property.owner_id == user.pk


def can_apply(user, unit):
    """Landlords cannot apply to their own units."""
    return user is not None and not owns_unit(user, unit)


def can_decide(user, application):
    return owns_unit(user, application.unit)


def can_invite(user, unit):
    return owns_unit(user, unit)


def can_give_notice(user, lease, initiated_by):
    return lease.party_role(user) == initiated_by


def can_cancel_notice(user, notice):
    # Landlord-initiated notices are withdrawn through support, not this path.
    if notice.initiated_by != "tenant":
        return False
    return user is None or lease_party(user, notice.lease)


def can_manage_offboarding(user, notice):
    return user is not None and (notice.lease.landlord_id == user.pk or user.is_admin_user)


def can_fast_track(user):
    return user is not None and user.is_admin_user


def lease_party(user, lease):
    return lease.party_role(user) is not None
