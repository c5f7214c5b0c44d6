"""
Offboarding Service.

A lease is unwound through a notice:

    active -> inspection_scheduled -> completed
    active -> completed
    active -> cancelled  (tenant-initiated notices only)

Completing a notice terminates the lease and returns the unit to the
available pool. Admins can fast-track the whole flow in one step.
"""

import logging
from datetime import date

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import revoke_role
from apps.core.dates import add_months
from apps.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from apps.core.services.search_index import sync_unit_on_commit
from apps.leases.models import Lease
from apps.leases.services import release_unit
from apps.notifications.services import notify

from . import policies
from .models import OffboardingNotice

logger = logging.getLogger(__name__)

FAST_TRACK_REASON = "Admin fast-track offboarding"
DEPOSIT_STATUSES = [choice for choice, _ in OffboardingNotice.DEPOSIT_STATUS_CHOICES]


def _coerce_date(value, field):
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD).", errors={field: [str(value)]})


def _validate_deposit_status(deposit_status):
    if deposit_status not in DEPOSIT_STATUSES:
        raise ValidationError(
            f"Deposit status must be one of: {', '.join(DEPOSIT_STATUSES)}.",
            errors={"depositStatus": [str(deposit_status)]},
        )


class OffboardingStateMachine:
    """Service for notices, inspections and lease termination."""

    @staticmethod
    def default_move_out_date(notice_date):
        return add_months(notice_date, settings.NOTICE_PERIOD_MONTHS)

    @staticmethod
    def _get_lease(lease_id):
        try:
            return Lease.objects.select_related("unit__property", "tenant", "landlord").get(pk=lease_id)
        except Lease.DoesNotExist:
            raise NotFoundError("Lease not found.")

    @staticmethod
    def _get_notice(notice_id):
        try:
            return OffboardingNotice.objects.select_related(
                "lease__unit__property", "lease__tenant", "lease__landlord"
            ).get(pk=notice_id)
        except OffboardingNotice.DoesNotExist:
            raise NotFoundError("Notice not found.")

    @staticmethod
    def _other_party(lease, initiated_by):
        return lease.landlord if initiated_by == "tenant" else lease.tenant

    # =========================================================================
    # Notice
    # =========================================================================

    @staticmethod
    def give_notice(lease_id, initiated_by, move_out_date=None, reason=None, initiated_by_user=None):
        if initiated_by not in ("tenant", "landlord"):
            raise ValidationError(
                "initiatedBy must be 'tenant' or 'landlord'.", errors={"initiatedBy": [str(initiated_by)]}
            )
        lease = OffboardingStateMachine._get_lease(lease_id)
        if initiated_by_user is not None and not policies.can_give_notice(initiated_by_user, lease, initiated_by):
            raise ForbiddenError(f"Only the lease's {initiated_by} can give this notice.")

        notice_date = timezone.localdate()
        move_out_date = _coerce_date(move_out_date, "moveOutDate") or OffboardingStateMachine.default_move_out_date(
            notice_date
        )
        if move_out_date <= notice_date:
            raise ValidationError(
                "Move-out date must be after the notice date.", errors={"moveOutDate": [move_out_date.isoformat()]}
            )

        if OffboardingNotice.objects.filter(lease=lease, status__in=OffboardingNotice.OPEN_STATUSES).exists():
            raise ConflictError("Notice has already been given on this lease.")

        with transaction.atomic():
            moved = Lease.objects.filter(pk=lease.pk, status=Lease.STATUS_ACTIVE).update(
                status=Lease.STATUS_NOTICE_GIVEN, updated_at=timezone.now()
            )
            if not moved:
                raise InvalidStateError(f"Notice can only be given on an active lease (lease is {lease.status}).")
            try:
                with transaction.atomic():
                    notice = OffboardingNotice.objects.create(
                        lease=lease,
                        initiated_by=initiated_by,
                        initiated_by_user=initiated_by_user,
                        notice_date=notice_date,
                        move_out_date=move_out_date,
                        reason=reason or "",
                    )
            except IntegrityError:
                raise ConflictError("Notice has already been given on this lease.")

            notify(
                OffboardingStateMachine._other_party(lease, initiated_by),
                type="notice_given",
                title="Move-out notice given",
                message=f"The {initiated_by} gave notice on {lease.unit}. Move-out date: {move_out_date:%B %d, %Y}.",
                data={"notice_id": str(notice.pk), "lease_id": str(lease.pk)},
            )

        lease.status = Lease.STATUS_NOTICE_GIVEN
        logger.info(
            "Notice %s given by %s on lease %s, move-out %s", notice.pk, initiated_by, lease.pk, move_out_date
        )
        return notice

    @staticmethod
    def cancel(notice_id, cancellation_reason=None, cancelled_by=None):
        notice = OffboardingStateMachine._get_notice(notice_id)
        if notice.status != OffboardingNotice.STATUS_ACTIVE:
            raise InvalidStateError(f"Only active notices can be cancelled (notice is {notice.status}).")
        if not policies.can_cancel_notice(cancelled_by, notice):
            raise ForbiddenError("This notice cannot be cancelled.")
        if timezone.localdate() >= notice.move_out_date:
            raise InvalidStateError("The move-out date has passed; the notice can no longer be cancelled.")

        now = timezone.now()
        with transaction.atomic():
            cancelled = OffboardingNotice.objects.filter(
                pk=notice.pk, status=OffboardingNotice.STATUS_ACTIVE
            ).update(
                status=OffboardingNotice.STATUS_CANCELLED,
                cancelled_at=now,
                cancelled_by=cancelled_by,
                cancellation_reason=cancellation_reason or "",
                updated_at=now,
            )
            if not cancelled:
                raise InvalidStateError("Only active notices can be cancelled.")
            Lease.objects.filter(pk=notice.lease_id, status=Lease.STATUS_NOTICE_GIVEN).update(
                status=Lease.STATUS_ACTIVE, updated_at=now
            )
            notify(
                OffboardingStateMachine._other_party(notice.lease, notice.initiated_by),
                type="notice_cancelled",
                title="Move-out notice cancelled",
                message=f"The notice on {notice.lease.unit} was cancelled. The lease continues.",
                data={"notice_id": str(notice.pk)},
            )

        notice.refresh_from_db()
        logger.info("Notice %s cancelled", notice.pk)
        return notice

    # =========================================================================
    # Inspection
    # =========================================================================

    @staticmethod
    def schedule_inspection(notice_id, inspection_date, inspection_notes=None, actor=None):
        """Schedule (or reschedule) the move-out inspection on an open notice."""
        inspection_date = _coerce_date(inspection_date, "inspectionDate")
        if inspection_date is None:
            raise ValidationError("Inspection date is required.", errors={"inspectionDate": ["This field is required."]})
        notice = OffboardingStateMachine._get_notice(notice_id)
        if actor is not None and not policies.can_manage_offboarding(actor, notice):
            raise ForbiddenError("Only the landlord can schedule the inspection.")

        updates = {
            "status": OffboardingNotice.STATUS_INSPECTION_SCHEDULED,
            "inspection_date": inspection_date,
            "updated_at": timezone.now(),
        }
        if inspection_notes is not None:
            updates["inspection_notes"] = inspection_notes
        with transaction.atomic():
            scheduled = OffboardingNotice.objects.filter(
                pk=notice.pk, status__in=OffboardingNotice.OPEN_STATUSES
            ).update(**updates)
            if not scheduled:
                raise InvalidStateError(f"Cannot schedule an inspection on a {notice.status} notice.")
            notify(
                notice.lease.tenant,
                type="inspection_scheduled",
                title="Move-out inspection scheduled",
                message=f"Your move-out inspection for {notice.lease.unit} is on {inspection_date:%B %d, %Y}.",
                data={"notice_id": str(notice.pk)},
            )

        notice.refresh_from_db()
        logger.info("Inspection for notice %s scheduled on %s", notice.pk, inspection_date)
        return notice

    # =========================================================================
    # Completion
    # =========================================================================

    @staticmethod
    def _terminate(lease, now):
        """Terminal effects shared by completion and fast-track."""
        terminated = Lease.objects.filter(pk=lease.pk, status__in=Lease.OCCUPIED_STATUSES).update(
            status=Lease.STATUS_TERMINATED, terminated_at=now, updated_at=now
        )
        if not terminated:
            raise InvalidStateError("This lease has already been terminated.")
        lease.status = Lease.STATUS_TERMINATED
        lease.terminated_at = now

        release_unit(lease.unit)
        sync_unit_on_commit(lease.unit_id)

        tenant = lease.tenant
        still_renting = Lease.objects.filter(
            tenant=tenant, status__in=Lease.OCCUPIED_STATUSES
        ).exclude(pk=lease.pk).exists()
        if not still_renting:
            revoke_role(tenant, User.ROLE_TENANT)

        notify(
            tenant,
            type="offboarding_completed",
            title="Your lease has ended",
            message=f"Your lease for {lease.unit} has been closed out. Thank you for renting with us.",
            data={"lease_id": str(lease.pk)},
        )

    @staticmethod
    def complete(
        notice_id, deposit_status, inspection_date=None, inspection_notes=None, deposit_notes=None, actor=None
    ):
        _validate_deposit_status(deposit_status)
        inspection_date = _coerce_date(inspection_date, "inspectionDate")
        notice = OffboardingStateMachine._get_notice(notice_id)
        if actor is not None and not policies.can_manage_offboarding(actor, notice):
            raise ForbiddenError("Only the landlord can complete offboarding.")
        if not notice.is_open:
            raise InvalidStateError(f"Notice is already {notice.status}.")

        now = timezone.now()
        updates = {
            "status": OffboardingNotice.STATUS_COMPLETED,
            "completed_at": now,
            "inspection_completed": True,
            "deposit_status": deposit_status,
            "updated_at": now,
        }
        if inspection_date is not None:
            updates["inspection_date"] = inspection_date
        if inspection_notes is not None:
            updates["inspection_notes"] = inspection_notes
        if deposit_notes is not None:
            updates["deposit_notes"] = deposit_notes

        with transaction.atomic():
            completed = OffboardingNotice.objects.filter(
                pk=notice.pk, status__in=OffboardingNotice.OPEN_STATUSES
            ).update(**updates)
            if not completed:
                raise InvalidStateError("Notice is no longer open.")
            OffboardingStateMachine._terminate(notice.lease, now)

        notice.refresh_from_db()
        logger.info("Offboarding completed for notice %s (deposit %s)", notice.pk, deposit_status)
        return notice

    @staticmethod
    def fast_track(lease_id, actor, deposit_status="returned", deposit_notes=None, reason=None):
        """Terminate a lease immediately, skipping the notice period."""
        if not policies.can_fast_track(actor):
            raise ForbiddenError("Only administrators can fast-track offboarding.")
        _validate_deposit_status(deposit_status)
        lease = OffboardingStateMachine._get_lease(lease_id)
        if lease.status == Lease.STATUS_TERMINATED:
            raise InvalidStateError("This lease has already been terminated.")

        if deposit_notes is None:
            deposit_notes = (
                "Fast-track: deposit auto-returned" if deposit_status == "returned" else "Fast-track offboarding"
            )

        now = timezone.now()
        today = timezone.localdate()
        with transaction.atomic():
            superseded = OffboardingNotice.objects.filter(
                lease=lease, status__in=OffboardingNotice.OPEN_STATUSES
            ).update(
                status=OffboardingNotice.STATUS_CANCELLED,
                cancelled_at=now,
                cancelled_by=actor,
                cancellation_reason=FAST_TRACK_REASON,
                updated_at=now,
            )
            notice = OffboardingNotice.objects.create(
                lease=lease,
                initiated_by="landlord",
                initiated_by_user=actor,
                status=OffboardingNotice.STATUS_COMPLETED,
                notice_date=today,
                move_out_date=today,
                reason=reason or FAST_TRACK_REASON,
                inspection_date=today,
                inspection_completed=True,
                deposit_status=deposit_status,
                deposit_notes=deposit_notes,
                completed_at=now,
            )
            OffboardingStateMachine._terminate(lease, now)

        logger.info(
            "Lease %s fast-tracked by %s (superseded %d open notice(s))", lease.pk, actor.pk, superseded
        )
        return notice
