"""JSON representations returned by the lifecycle endpoints."""


def _iso(value):
    return value.isoformat() if value else None


def unit_summary(unit):
    prop = unit.property
    return {
        "id": str(unit.pk),
        "unitNumber": unit.unit_number,
        "monthlyRent": str(unit.monthly_rent),
        "securityDeposit": str(unit.security_deposit),
        "currency": unit.currency,
        "property": {
            "id": str(prop.pk),
            "name": prop.name,
            "address": prop.full_address,
        },
    }


def application_json(application):
    return {
        "id": str(application.pk),
        "unitId": str(application.unit_id),
        "applicantId": str(application.applicant_id),
        "status": application.status,
        "submittedAt": _iso(application.submitted_at),
        "reviewedAt": _iso(application.reviewed_at),
        "decisionNotes": application.decision_notes,
        "leaseId": str(application.lease_id) if application.lease_id else None,
    }


def invitation_json(invitation):
    return {
        "id": str(invitation.pk),
        "tenantEmail": invitation.tenant_email,
        "tenantName": invitation.tenant_name,
        "status": invitation.status,
        "expiresAt": _iso(invitation.expires_at),
        "acceptedAt": _iso(invitation.accepted_at),
        "leaseId": str(invitation.lease_id) if invitation.lease_id else None,
    }


def progress_json(progress, data=None):
    return {
        "status": progress.status,
        "currentStep": progress.current_step,
        "totalSteps": len(progress.STEPS),
        "steps": progress.STEPS,
        "completedSteps": progress.completed_steps,
        "percentComplete": progress.get_progress_percent(),
        "data": data if data is not None else {},
        "startedAt": _iso(progress.started_at),
        "completedAt": _iso(progress.completed_at),
    }


def onboarding_view_json(view):
    payload = {
        "alreadyCompleted": view.already_completed,
        "invitation": invitation_json(view.invitation),
        "unit": unit_summary(view.invitation.unit),
    }
    if not view.already_completed:
        payload["progress"] = progress_json(view.progress, view.data)
    return payload


def notice_json(notice):
    return {
        "id": str(notice.pk),
        "leaseId": str(notice.lease_id),
        "initiatedBy": notice.initiated_by,
        "status": notice.status,
        "noticeDate": _iso(notice.notice_date),
        "moveOutDate": _iso(notice.move_out_date),
        "reason": notice.reason,
        "inspectionDate": _iso(notice.inspection_date),
        "inspectionNotes": notice.inspection_notes,
        "inspectionCompleted": notice.inspection_completed,
        "depositStatus": notice.deposit_status,
        "depositNotes": notice.deposit_notes,
        "cancellationReason": notice.cancellation_reason,
        "cancelledAt": _iso(notice.cancelled_at),
        "completedAt": _iso(notice.completed_at),
    }
