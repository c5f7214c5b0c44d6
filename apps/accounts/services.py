"""
Account services.

Provides functions for:
- Granting and revoking roles without clobbering concurrent role changes
- Persisting a tenant profile from validated application/onboarding sections
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from django.db import transaction

from .models import TenantProfile, User

logger = logging.getLogger(__name__)


def grant_role(user, role):
    """Add ``role`` to the user's roles. Returns True if it was newly added."""
    with transaction.atomic():
        locked = User.objects.select_for_update().get(pk=user.pk)
        roles = list(locked.roles or [])
        if role in roles:
            user.roles = roles
            return False
        roles.append(role)
        locked.roles = roles
        locked.save(update_fields=["roles"])
    user.roles = roles
    logger.info("Granted role %s to user %s", role, user.pk)
    return True


def revoke_role(user, role):
    """Remove ``role`` from the user's roles. Returns True if it was present."""
    with transaction.atomic():
        locked = User.objects.select_for_update().get(pk=user.pk)
        roles = [r for r in (locked.roles or []) if r != role]
        if len(roles) == len(locked.roles or []):
            user.roles = roles
            return False
        locked.roles = roles
        locked.save(update_fields=["roles"])
    user.roles = roles
    logger.info("Revoked role %s from user %s", role, user.pk)
    return True


def _parse_date(value):
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _parse_decimal(value):
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def persist_tenant_profile(user, sections, move_in_date=None):
    """
    Create or update the user's TenantProfile from section data.

    ``sections`` maps section ids (personal, employment, emergency_contact,
    proof_of_address, photo_id) to already-validated answers. Only values that
    are present overwrite existing profile fields.
    """
    personal = sections.get("personal") or {}
    employment = sections.get("employment") or {}
    emergency = sections.get("emergency_contact") or {}
    proof = sections.get("proof_of_address") or {}
    photo = sections.get("photo_id") or {}

    profile, created = TenantProfile.objects.get_or_create(user=user)
    updates = {
        "date_of_birth": _parse_date(personal.get("date_of_birth")),
        "ssn_last_four": personal.get("ssn_last_four"),
        "drivers_license_state": personal.get("drivers_license_state"),
        "drivers_license_number": personal.get("drivers_license_number"),
        "employer_name": employment.get("employer_name"),
        "employment_type": employment.get("employment_type"),
        "job_title": employment.get("job_title"),
        "annual_income": _parse_decimal(employment.get("annual_income")),
        "emergency_contact_name": emergency.get("name"),
        "emergency_contact_relationship": emergency.get("relationship"),
        "emergency_contact_phone": emergency.get("phone"),
        "emergency_contact_email": emergency.get("email"),
        "proof_of_address_url": proof.get("file_url"),
        "photo_id_url": photo.get("file_url"),
        "move_in_date": move_in_date,
    }
    changed = []
    for field, value in updates.items():
        if value in (None, ""):
            continue
        setattr(profile, field, value)
        changed.append(field)
    if changed:
        profile.save()

    user_changed = []
    if personal.get("first_name") and not user.first_name:
        user.first_name = personal["first_name"]
        user_changed.append("first_name")
    if personal.get("last_name") and not user.last_name:
        user.last_name = personal["last_name"]
        user_changed.append("last_name")
    if personal.get("phone") and not user.phone_number:
        user.phone_number = personal["phone"]
        user_changed.append("phone_number")
    if user_changed:
        user.save(update_fields=user_changed)

    logger.info(
        "%s tenant profile for user %s (%d fields)",
        "Created" if created else "Updated", user.pk, len(changed),
    )
    return profile
