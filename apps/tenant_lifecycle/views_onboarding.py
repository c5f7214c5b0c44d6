"""
Token-addressed onboarding endpoint.

GET reads progress, PATCH saves a step, POST completes. Reading and saving
only need the token; completing also needs a signed-in user whose email
matches the invitation.
"""

from django.http import JsonResponse

from apps.accounts.identity import VerifiedIdentity
from apps.core.decorators import api_view

from .serializers import invitation_json, onboarding_view_json, progress_json
from .services import OnboardingProgressTracker


@api_view(methods=["GET", "PATCH", "POST"], login=False)
def onboarding_progress(request, token):
    if request.method == "GET":
        view = OnboardingProgressTracker.get(token)
        return JsonResponse(onboarding_view_json(view))

    if request.method == "PATCH":
        progress = OnboardingProgressTracker.save(
            token,
            request.data.get("stepId"),
            request.data.get("stepData"),
            advance_to=request.data.get("currentStep"),
        )
        return JsonResponse({"progress": progress_json(progress)})

    if not request.user.is_authenticated:
        return JsonResponse(
            {"error": "Sign in to finish onboarding.", "code": "unauthenticated"}, status=401
        )
    result = OnboardingProgressTracker.complete(token, VerifiedIdentity.from_user(request.user))
    return JsonResponse({
        "alreadyCompleted": result.already_completed,
        "invitation": invitation_json(result.invitation),
        "progress": progress_json(result.progress),
        "leaseId": str(result.lease.pk) if result.lease else None,
    })
