import logging
import uuid

from django.conf import settings
from django.http import JsonResponse

from apps.core.decorators import admin_required, api_view
from apps.core.exceptions import ForbiddenError, ValidationError
from apps.core.services.payments.factory import get_active_gateway

from .services import PaymentOrchestrator
from .webhooks import process_event

logger = logging.getLogger(__name__)


def _payment_json(payment):
    return {
        "id": str(payment.pk),
        "type": payment.type,
        "amount": str(payment.amount),
        "currency": payment.currency,
        "status": payment.status,
        "dueDate": payment.due_date.isoformat(),
        "paidAt": payment.paid_at.isoformat() if payment.paid_at else None,
    }


@api_view(methods=["POST"])
def payment_checkout(request, payment_id):
    url = PaymentOrchestrator.initiate_checkout(
        payment_id,
        request.user,
        success_url=request.data.get("successUrl"),
        cancel_url=request.data.get("cancelUrl"),
    )
    return JsonResponse({"url": url})


@api_view(methods=["POST"])
def payment_retry(request, payment_id):
    payment = PaymentOrchestrator.reopen(payment_id, request.user)
    return JsonResponse({"payment": _payment_json(payment)})


@api_view(methods=["POST"])
def stripe_connect(request):
    landlord = request.user
    if not landlord.is_landlord:
        raise ForbiddenError("Only landlords can set up payouts.")

    # Test-mode custom accounts become ready without user interaction.
    if settings.STRIPE_CONNECT_ACCOUNT_TYPE == "custom":
        account_id = PaymentOrchestrator.ensure_connected_account(landlord)
        return JsonResponse({
            "accountId": account_id,
            "status": landlord.stripe_connected_account_status,
        })

    url = PaymentOrchestrator.onboarding_link(landlord)
    return JsonResponse({
        "accountId": landlord.stripe_connected_account_id,
        "status": landlord.stripe_connected_account_status,
        "url": url,
    })


@api_view(methods=["POST"])
@admin_required
def generate_payment(request):
    try:
        tenant_id = uuid.UUID(str(request.data.get("tenantId") or ""))
    except ValueError:
        raise ValidationError("tenantId is required.", errors={"tenantId": ["Enter a valid tenant id."]})
    payment = PaymentOrchestrator.generate_rent_payment(tenant_id)
    logger.info("Admin %s generated rent payment %s", request.user.pk, payment.pk)
    return JsonResponse({"payment": _payment_json(payment)}, status=201)


@api_view(methods=["POST"], login=False)
def stripe_webhook(request):
    gateway = get_active_gateway()
    try:
        event = gateway.verify_webhook(request.body, request.headers.get("Stripe-Signature", ""))
    except ValueError:
        logger.warning("Rejected webhook with invalid signature")
        return JsonResponse({"error": "Invalid signature.", "code": "invalid_signature"}, status=400)

    handled = process_event(event)
    return JsonResponse({"received": True, "handled": handled})
