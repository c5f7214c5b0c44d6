"""
Onboarding Service.

Tracks a tenant's progress through the token-addressed onboarding
questionnaire:
- Reading progress by invitation token (safe to repeat after completion)
- Saving validated step answers with set semantics for completed steps
- Single-shot completion that binds the verified user to the tenancy
- Direct invitations sent by a landlord without an application
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import (
    ConflictError,
    ForbiddenError,
    IncompleteError,
    InvalidStateError,
    InvitationExpiredError,
    NotFoundError,
    ValidationError,
)
from apps.core.url_utils import get_absolute_url
from apps.leases.services import activate_tenancy
from apps.notifications.services import notify
from apps.properties.models import Unit

from . import policies
from .forms import clean_section, mask_sections
from .models import OnboardingProgress, TenantInvitation
from .services_applications import validate_rent_due_day

logger = logging.getLogger(__name__)
User = get_user_model()


@dataclass
class OnboardingView:
    invitation: TenantInvitation
    progress: OnboardingProgress
    already_completed: bool = False

    @property
    def data(self):
        return mask_sections(self.progress.data)


@dataclass
class OnboardingResult:
    invitation: TenantInvitation
    progress: OnboardingProgress
    lease: Optional[object] = None
    already_completed: bool = False


class OnboardingProgressTracker:
    """Service for token-addressed tenant onboarding."""

    # =========================================================================
    # Lookup
    # =========================================================================

    @staticmethod
    def _get_invitation(token):
        try:
            return TenantInvitation.objects.select_related(
                "unit__property", "lease", "landlord", "progress"
            ).get(token=token)
        except TenantInvitation.DoesNotExist:
            raise NotFoundError("Invalid onboarding link.")

    @staticmethod
    def get(token):
        """
        Return the invitation and its progress.

        An accepted invitation always answers with ``already_completed`` so
        revisiting the link after finishing never errors.
        """
        invitation = OnboardingProgressTracker._get_invitation(token)
        progress = invitation.progress
        if invitation.is_accepted:
            return OnboardingView(invitation, progress, already_completed=True)
        if invitation.is_expired:
            raise InvitationExpiredError("This invitation has expired. Ask your landlord for a new link.")
        return OnboardingView(invitation, progress)

    # =========================================================================
    # Saving steps
    # =========================================================================

    @staticmethod
    def save(token, step_id, step_data, advance_to=None):
        if step_id not in OnboardingProgress.STEPS:
            raise ValidationError(f"Unknown onboarding step '{step_id}'.", errors={"stepId": [str(step_id)]})
        if advance_to is not None:
            try:
                advance_to = int(advance_to)
            except (TypeError, ValueError):
                advance_to = 0
            if not 1 <= advance_to <= len(OnboardingProgress.STEPS):
                raise ValidationError(
                    f"Step number must be between 1 and {len(OnboardingProgress.STEPS)}.",
                    errors={"currentStep": [str(advance_to)]},
                )

        cleaned = clean_section(step_id, step_data)
        invitation = OnboardingProgressTracker._get_invitation(token)

        with transaction.atomic():
            progress = OnboardingProgress.objects.select_for_update().get(invitation=invitation)
            if invitation.is_accepted or progress.status == OnboardingProgress.STATUS_COMPLETED:
                raise InvalidStateError("Onboarding has already been completed.")
            if invitation.is_expired:
                raise InvitationExpiredError("This invitation has expired. Ask your landlord for a new link.")

            previous = progress.data.get(step_id) or {}
            if step_id == "personal" and "ssn_last_four" not in cleaned and previous.get("ssn_last_four"):
                cleaned["ssn_last_four"] = previous["ssn_last_four"]

            progress.data = {**progress.data, step_id: cleaned}
            progress.mark_step_complete(step_id)
            if advance_to is not None:
                progress.current_step = advance_to
            if progress.status == OnboardingProgress.STATUS_NOT_STARTED:
                progress.status = OnboardingProgress.STATUS_IN_PROGRESS
                progress.started_at = timezone.now()
            progress.save()

        logger.info("Saved onboarding step %s for invitation %s", step_id, invitation.pk)
        return progress

    # =========================================================================
    # Completion
    # =========================================================================

    @staticmethod
    def complete(token, identity):
        """
        Finish onboarding for the invitee identified by ``identity``.

        Completion happens once. A repeated call, including one that loses a
        race with a concurrent completion, returns the completed result
        without side effects.
        """
        invitation = OnboardingProgressTracker._get_invitation(token)
        if not identity.matches_email(invitation.tenant_email):
            raise ForbiddenError("This invitation was sent to a different email address.")
        if invitation.is_accepted:
            return OnboardingProgressTracker._completed_result(invitation)
        if invitation.is_expired:
            raise InvitationExpiredError("This invitation has expired. Ask your landlord for a new link.")

        progress = invitation.progress
        missing = progress.missing_steps
        if missing:
            raise IncompleteError(
                f"Complete these steps first: {', '.join(missing)}.", missing_steps=missing
            )

        try:
            user = User.objects.get(pk=identity.user_id)
        except User.DoesNotExist:
            raise NotFoundError("User not found.")

        with transaction.atomic():
            now = timezone.now()
            accepted = TenantInvitation.objects.filter(
                pk=invitation.pk, accepted_at__isnull=True
            ).update(accepted_at=now, tenant_user=user, updated_at=now)
            if not accepted:
                logger.info("Invitation %s was completed concurrently", invitation.pk)
                return OnboardingProgressTracker._completed_result(invitation)

            OnboardingProgress.objects.filter(pk=progress.pk).update(
                status=OnboardingProgress.STATUS_COMPLETED,
                completed_at=now,
                updated_at=now,
            )
            invitation.refresh_from_db()
            lease = activate_tenancy(invitation, user, progress.data)

            notify(
                invitation.landlord,
                type="onboarding_completed",
                title="Tenant onboarding complete",
                message=f"{user} finished onboarding for {invitation.unit}.",
                data={"invitation_id": str(invitation.pk), "lease_id": str(lease.pk)},
            )

        progress.refresh_from_db()
        logger.info("Onboarding completed for invitation %s by user %s", invitation.pk, user.pk)
        return OnboardingResult(invitation, progress, lease=lease)

    @staticmethod
    def _completed_result(invitation):
        invitation.refresh_from_db()
        progress = OnboardingProgress.objects.get(invitation=invitation)
        return OnboardingResult(invitation, progress, lease=invitation.lease, already_completed=True)

    # =========================================================================
    # Direct invitations
    # =========================================================================

    @staticmethod
    def invite(landlord, unit_id, tenant_email, tenant_name="", rent_due_day=None):
        """Invite a known tenant to onboard onto an available unit without an application."""
        try:
            unit = Unit.objects.select_related("property__owner").get(pk=unit_id)
        except Unit.DoesNotExist:
            raise NotFoundError("Unit not found.")
        if not policies.can_invite(landlord, unit):
            raise ForbiddenError("Only the unit's landlord can invite tenants.")
        if not tenant_email:
            raise ValidationError("Tenant email is required.", errors={"tenantEmail": ["This field is required."]})
        if not unit.is_available:
            raise InvalidStateError("This unit is already leased.")
        rent_due_day = validate_rent_due_day(rent_due_day)

        open_invitation = TenantInvitation.objects.filter(
            unit=unit,
            tenant_email__iexact=tenant_email,
            accepted_at__isnull=True,
            expires_at__gt=timezone.now(),
        ).exists()
        if open_invitation:
            raise ConflictError("An invitation for this tenant is already pending.")

        with transaction.atomic():
            invitation = TenantInvitation.objects.create(
                tenant_email=tenant_email,
                tenant_name=tenant_name,
                unit=unit,
                landlord=landlord,
                rent_due_day=rent_due_day,
            )
            OnboardingProgress.objects.create(invitation=invitation)
            notify(
                email=tenant_email,
                type="tenant_invitation",
                title=f"You're invited to move in to {unit}",
                message=(
                    f"Hello {tenant_name or tenant_email},\n\n"
                    f"{landlord} has invited you to complete your move-in details for {unit}."
                ),
                data={"invitation_id": str(invitation.pk)},
                action_url=get_absolute_url("onboarding:progress", token=invitation.token),
            )

        logger.info("Created invitation %s for %s at unit %s", invitation.pk, tenant_email, unit.pk)
        return invitation
