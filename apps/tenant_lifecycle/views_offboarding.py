"""
Offboarding endpoints: give notice, schedule inspection, cancel, complete.
"""

import uuid

from django.http import JsonResponse

from apps.core.decorators import admin_required, api_view
from apps.core.exceptions import ValidationError
from apps.leases.models import Lease

from .serializers import notice_json
from .services_offboarding import OffboardingStateMachine


def _lease_id(request):
    try:
        return uuid.UUID(str(request.data.get("leaseId") or ""))
    except ValueError:
        raise ValidationError("A valid leaseId is required.", errors={"leaseId": ["Enter a valid lease id."]})


def _initiating_side(request, lease_id):
    """The caller's side of the lease unless the body names one explicitly."""
    initiated_by = request.data.get("initiatedBy")
    if initiated_by:
        return initiated_by
    lease = Lease.objects.filter(pk=lease_id).only("tenant_id", "landlord_id").first()
    return (lease.party_role(request.user) if lease else None) or "tenant"


@api_view(methods=["POST"])
def give_notice(request):
    lease_id = _lease_id(request)
    notice = OffboardingStateMachine.give_notice(
        lease_id,
        _initiating_side(request, lease_id),
        move_out_date=request.data.get("moveOutDate"),
        reason=request.data.get("reason"),
        initiated_by_user=request.user,
    )
    return JsonResponse({"notice": notice_json(notice)}, status=201)


@api_view(methods=["PATCH"])
def update_notice(request, notice_id):
    notice = OffboardingStateMachine.schedule_inspection(
        notice_id,
        request.data.get("inspectionDate"),
        inspection_notes=request.data.get("inspectionNotes"),
        actor=request.user,
    )
    return JsonResponse({"notice": notice_json(notice)})


@api_view(methods=["POST"])
def cancel_notice(request, notice_id):
    notice = OffboardingStateMachine.cancel(
        notice_id,
        cancellation_reason=request.data.get("reason"),
        cancelled_by=request.user,
    )
    return JsonResponse({"notice": notice_json(notice)})


@api_view(methods=["POST"])
def complete_notice(request, notice_id):
    notice = OffboardingStateMachine.complete(
        notice_id,
        request.data.get("depositStatus"),
        inspection_date=request.data.get("inspectionDate"),
        inspection_notes=request.data.get("inspectionNotes"),
        deposit_notes=request.data.get("depositNotes"),
        actor=request.user,
    )
    return JsonResponse({"notice": notice_json(notice)})


@api_view(methods=["POST"])
@admin_required
def fast_track(request):
    lease_id = _lease_id(request)
    notice = OffboardingStateMachine.fast_track(
        lease_id,
        request.user,
        deposit_status=request.data.get("depositStatus", "returned"),
        deposit_notes=request.data.get("depositNotes"),
        reason=request.data.get("reason"),
    )
    return JsonResponse({"notice": notice_json(notice)})
