"""
Application endpoints: apply, decide, withdraw, and direct tenant invitations.
"""

from django.http import JsonResponse

from apps.core.decorators import api_view

from .serializers import application_json, invitation_json
from .services import OnboardingProgressTracker
from .services_applications import ApplicationReviewService


@api_view(methods=["POST"])
def apply(request, unit_id):
    application = ApplicationReviewService.submit(
        request.user, unit_id, request.data.get("applicationData")
    )
    return JsonResponse({"application": application_json(application)}, status=201)


@api_view(methods=["POST"])
def decide(request, application_id):
    application = ApplicationReviewService.decide(
        application_id,
        request.data.get("decision"),
        notes=request.data.get("notes"),
        reviewer=request.user,
        rent_due_day=request.data.get("rentDueDay"),
    )
    return JsonResponse({"application": application_json(application)})


@api_view(methods=["POST"])
def withdraw(request, application_id):
    application = ApplicationReviewService.withdraw(application_id, request.user)
    return JsonResponse({"application": application_json(application)})


@api_view(methods=["POST"])
def invite_tenant(request, unit_id):
    invitation = OnboardingProgressTracker.invite(
        request.user,
        unit_id,
        tenant_email=request.data.get("tenantEmail", ""),
        tenant_name=request.data.get("tenantName", ""),
        rent_due_day=request.data.get("rentDueDay"),
    )
    return JsonResponse({"invitation": invitation_json(invitation)}, status=201)
