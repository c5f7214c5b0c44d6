"""
Application Review Service.

Handles tenancy applications from submission to the landlord's decision.
Approval provisions the whole tenancy in one transaction: lease, unit
availability, onboarding invitation and move-in payment.
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.billing.services import PaymentOrchestrator
from apps.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from apps.core.services.search_index import sync_unit_on_commit
from apps.core.url_utils import get_absolute_url
from apps.leases.services import provision_lease
from apps.notifications.services import notify
from apps.properties.models import Unit

from . import policies
from .forms import clean_application_data
from .models import OnboardingProgress, TenancyApplication, TenantInvitation

logger = logging.getLogger(__name__)

DECISIONS = (TenancyApplication.STATUS_APPROVED, TenancyApplication.STATUS_REJECTED)


def validate_rent_due_day(value):
    if value is None:
        return 1
    try:
        day = int(value)
    except (TypeError, ValueError):
        day = 0
    if not 1 <= day <= 31:
        raise ValidationError("Rent due day must be between 1 and 31.", errors={"rentDueDay": [str(value)]})
    return day


class ApplicationReviewService:
    """Service for submitting and deciding tenancy applications."""

    # =========================================================================
    # Submission
    # =========================================================================

    @staticmethod
    def submit(applicant, unit_id, application_data):
        try:
            unit = Unit.objects.select_related("property__owner").get(pk=unit_id)
        except Unit.DoesNotExist:
            raise NotFoundError("Unit not found.")

        if not policies.can_apply(applicant, unit):
            raise ForbiddenError("You cannot apply to your own unit.")
        if not unit.is_listed:
            raise InvalidStateError("This unit is not accepting applications.")

        cleaned = clean_application_data(application_data)

        if TenancyApplication.objects.filter(
            applicant=applicant, unit=unit, status=TenancyApplication.STATUS_PENDING
        ).exists():
            raise ConflictError("You already have a pending application for this unit.")

        try:
            with transaction.atomic():
                application = TenancyApplication.objects.create(
                    applicant=applicant,
                    unit=unit,
                    application_data=cleaned,
                )
                notify(
                    unit.property.owner,
                    type="application_received",
                    title="New application",
                    message=f"{applicant} applied for {unit}.",
                    data={"application_id": str(application.pk)},
                )
        except IntegrityError:
            raise ConflictError("You already have a pending application for this unit.")

        logger.info("Application %s submitted by %s for unit %s", application.pk, applicant.pk, unit.pk)
        return application

    @staticmethod
    def withdraw(application_id, applicant):
        application = ApplicationReviewService._get(application_id)
        if application.applicant_id != applicant.pk:
            raise ForbiddenError("Only the applicant can withdraw an application.")

        withdrawn = TenancyApplication.objects.filter(
            pk=application.pk, status=TenancyApplication.STATUS_PENDING
        ).update(status=TenancyApplication.STATUS_WITHDRAWN, updated_at=timezone.now())
        if not withdrawn:
            raise InvalidStateError("Only pending applications can be withdrawn.")

        application.refresh_from_db()
        logger.info("Application %s withdrawn", application.pk)
        return application

    # =========================================================================
    # Decision
    # =========================================================================

    @staticmethod
    def _get(application_id):
        try:
            return TenancyApplication.objects.select_related(
                "applicant", "unit__property__owner"
            ).get(pk=application_id)
        except TenancyApplication.DoesNotExist:
            raise NotFoundError("Application not found.")

    @staticmethod
    def _claim(application, status, notes, reviewer, now):
        """Move the application out of pending. Fails if another decision got there first."""
        claimed = TenancyApplication.objects.filter(
            pk=application.pk, status=TenancyApplication.STATUS_PENDING
        ).update(
            status=status,
            reviewed_at=now,
            reviewed_by=reviewer,
            decision_notes=notes or "",
            updated_at=now,
        )
        if not claimed:
            raise InvalidStateError("This application has already been reviewed.")
        application.status = status
        application.reviewed_at = now
        application.reviewed_by = reviewer
        application.decision_notes = notes or ""

    @staticmethod
    def decide(application_id, decision, notes=None, reviewer=None, rent_due_day=None):
        """
        Approve or reject a pending application.

        Approval creates the lease, invitation, onboarding progress and move-in
        payment and takes the unit off the market. Either all of it happens or
        none of it does, and the application stays pending on failure.
        """
        if decision not in DECISIONS:
            raise ValidationError(
                "Decision must be 'approved' or 'rejected'.", errors={"decision": [str(decision)]}
            )
        rent_due_day = validate_rent_due_day(rent_due_day)

        application = ApplicationReviewService._get(application_id)
        if reviewer is not None and not policies.can_decide(reviewer, application):
            raise ForbiddenError("Only the unit's landlord can review this application.")

        now = timezone.now()
        if decision == TenancyApplication.STATUS_REJECTED:
            with transaction.atomic():
                ApplicationReviewService._claim(application, decision, notes, reviewer, now)
                notify(
                    application.applicant,
                    type="application_rejected",
                    title="Application update",
                    message=f"Your application for {application.unit} was not approved.",
                    data={"application_id": str(application.pk)},
                )
            logger.info("Application %s rejected", application.pk)
            return application

        with transaction.atomic():
            ApplicationReviewService._claim(application, decision, notes, reviewer, now)

            unit = application.unit
            applicant = application.applicant
            lease = provision_lease(unit, applicant, rent_due_day=rent_due_day)
            application.lease = lease
            application.save(update_fields=["lease"])

            invitation = TenantInvitation.objects.create(
                tenant_email=applicant.email,
                tenant_name=applicant.get_full_name(),
                unit=unit,
                landlord=unit.property.owner,
                lease=lease,
                application=application,
                rent_due_day=rent_due_day,
            )
            OnboardingProgress.objects.create(invitation=invitation)
            payment = PaymentOrchestrator.create_move_in_payment(lease)

            sync_unit_on_commit(unit.pk)
            notify(
                applicant,
                type="application_approved",
                title="Your application was approved",
                message=(
                    f"Congratulations! Your application for {unit} was approved. "
                    "Complete your move-in details to finish setting up your tenancy."
                ),
                data={
                    "application_id": str(application.pk),
                    "lease_id": str(lease.pk),
                    "payment_id": str(payment.pk) if payment else None,
                },
                action_url=get_absolute_url("onboarding:progress", token=invitation.token),
            )

        logger.info(
            "Application %s approved: lease %s, invitation %s, payment %s",
            application.pk, lease.pk, invitation.pk, payment.pk if payment else None,
        )
        return application
