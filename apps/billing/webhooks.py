"""
Payment processor webhook dispatch.

Handlers are keyed by event type. Each handler resolves the local payment and
delegates to PaymentOrchestrator, whose transitions are idempotent, so
redelivered or out-of-order events are safe to process again.
"""

import logging

from apps.core.exceptions import NotFoundError

from .models import Payment
from .services import PaymentOrchestrator

logger = logging.getLogger(__name__)


def _resolve_payment_id(obj):
    metadata = obj.get("metadata") or {}
    if metadata.get("payment_id"):
        return metadata["payment_id"]

    lookup = None
    if obj.get("object") == "checkout.session":
        lookup = {"checkout_session_id": obj.get("id")}
    elif obj.get("object") == "payment_intent":
        lookup = {"payment_intent_id": obj.get("id")}
    if lookup:
        payment = Payment.objects.filter(**lookup).only("pk").first()
        if payment:
            return payment.pk
    return None


def _checkout_completed(obj):
    payment_id = _resolve_payment_id(obj)
    if payment_id is None:
        return None
    if obj.get("payment_status") not in (None, "paid", "no_payment_required"):
        # Async payment methods confirm later through payment_intent.succeeded
        logger.info("Checkout %s completed with payment_status=%s", obj.get("id"), obj.get("payment_status"))
        return None
    return PaymentOrchestrator.handle_payment_confirmed(
        payment_id, payment_intent_id=obj.get("payment_intent") or ""
    )


def _checkout_expired(obj):
    payment_id = _resolve_payment_id(obj)
    if payment_id is None:
        return None
    return PaymentOrchestrator.handle_checkout_expired(payment_id, session_id=obj.get("id") or "")


def _intent_succeeded(obj):
    payment_id = _resolve_payment_id(obj)
    if payment_id is None:
        return None
    return PaymentOrchestrator.handle_payment_confirmed(payment_id, payment_intent_id=obj.get("id") or "")


def _intent_failed(obj):
    payment_id = _resolve_payment_id(obj)
    if payment_id is None:
        return None
    error = obj.get("last_payment_error") or {}
    return PaymentOrchestrator.handle_payment_failed(payment_id, reason=error.get("message", ""))


def _account_updated(obj):
    return PaymentOrchestrator.sync_connected_account(
        obj.get("id"), bool(obj.get("charges_enabled")), bool(obj.get("payouts_enabled"))
    )


HANDLERS = {
    "checkout.session.completed": _checkout_completed,
    "checkout.session.expired": _checkout_expired,
    "payment_intent.succeeded": _intent_succeeded,
    "payment_intent.payment_failed": _intent_failed,
    "account.updated": _account_updated,
}


def process_event(event):
    """Apply a verified WebhookEvent. Returns True if a handler ran."""
    handler = HANDLERS.get(event.event_type)
    if handler is None:
        logger.info("Ignoring webhook event %s (%s)", event.event_id, event.event_type)
        return False
    try:
        handler(event.data)
    except NotFoundError:
        logger.warning("Webhook event %s (%s) refers to an unknown payment", event.event_id, event.event_type)
        return False
    logger.info("Processed webhook event %s (%s)", event.event_id, event.event_type)
    return True
