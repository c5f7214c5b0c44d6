import logging
import time

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PaymentProcessorError,
    ProvisioningTimeoutError,
    ValidationError,
)
from apps.core.services.payments.base import LineItem
from apps.core.services.payments.factory import get_active_gateway
from apps.core.url_utils import get_absolute_url
from apps.notifications.services import notify

from . import fees
from .models import Payment

logger = logging.getLogger(__name__)

# Statuses from which a processor confirmation completes the payment
CONFIRMABLE_STATUSES = (Payment.STATUS_PENDING, Payment.STATUS_PROCESSING, Payment.STATUS_FAILED)


class PaymentOrchestrator:
    """Payment creation, split checkout and processor event handling."""

    compute_fee = staticmethod(fees.compute_fee)
    compute_move_in_split = staticmethod(fees.compute_move_in_split)
    is_online_supported = staticmethod(fees.is_online_supported)

    # ============================================
    # Payment creation
    # ============================================

    @staticmethod
    def create_move_in_payment(lease):
        """
        Create the move-in payment (first month's rent plus deposit) for a lease.

        Returns None when the lease has nothing to collect.
        """
        rent = fees.to_money(lease.monthly_rent)
        deposit = fees.to_money(lease.security_deposit)
        total = rent + deposit
        if total <= 0:
            logger.info("Lease %s has no move-in amount; no payment created", lease.pk)
            return None

        notes = {"rentAmount": f"{rent:.2f}"}
        if deposit > 0:
            notes["securityDeposit"] = f"{deposit:.2f}"

        payment = Payment.objects.create(
            lease=lease,
            tenant=lease.tenant,
            unit=lease.unit,
            type=Payment.TYPE_MOVE_IN,
            amount=total,
            currency=lease.currency,
            status=Payment.STATUS_PENDING,
            due_date=lease.lease_start,
            notes=notes,
        )
        logger.info("Created move-in payment %s of %s %s for lease %s", payment.pk, total, lease.currency, lease.pk)
        return payment

    @staticmethod
    def create_rent_payment(lease, due_date):
        """Create a rent payment for ``due_date`` unless one already exists."""
        if Payment.objects.filter(lease=lease, type=Payment.TYPE_RENT, due_date=due_date).exists():
            return None
        try:
            with transaction.atomic():
                payment = Payment.objects.create(
                    lease=lease,
                    tenant=lease.tenant,
                    unit=lease.unit,
                    type=Payment.TYPE_RENT,
                    amount=fees.to_money(lease.monthly_rent),
                    currency=lease.currency,
                    status=Payment.STATUS_PENDING,
                    due_date=due_date,
                )
        except IntegrityError:
            # Created concurrently by another run
            return None
        logger.info("Created rent payment %s due %s for lease %s", payment.pk, due_date, lease.pk)
        return payment

    @staticmethod
    def generate_rent_payment(tenant_id, today=None):
        """
        Create the next rent payment for a tenant's occupied lease on demand.

        The due date is the lease's next due day on or after ``today``.
        """
        from apps.leases.models import Lease

        from .tasks import next_due_date

        lease = (
            Lease.objects.filter(tenant_id=tenant_id, status__in=Lease.OCCUPIED_STATUSES)
            .select_related("tenant", "unit")
            .order_by("-lease_start")
            .first()
        )
        if lease is None:
            raise NotFoundError("No active lease found for this tenant.")

        due = next_due_date(lease, today or timezone.localdate())
        payment = PaymentOrchestrator.create_rent_payment(lease, due)
        if payment is None:
            raise ConflictError("A rent payment already exists for this due date.")
        return payment

    # ============================================
    # Checkout
    # ============================================

    @staticmethod
    def fee_split_for(payment):
        if payment.type == Payment.TYPE_MOVE_IN:
            return fees.compute_move_in_split(payment.rent_portion, payment.deposit_portion)
        return fees.compute_fee(payment.amount)

    @staticmethod
    def _line_items(payment):
        unit_label = f"Unit {payment.unit.unit_number}"
        if payment.type == Payment.TYPE_MOVE_IN:
            items = [LineItem(name=f"First month's rent - {unit_label}", amount=payment.rent_portion)]
            if payment.deposit_portion > 0:
                items.append(LineItem(name=f"Security deposit - {unit_label}", amount=payment.deposit_portion))
            return items
        if payment.type == Payment.TYPE_RENT:
            return [LineItem(name=f"Rent due {payment.due_date:%Y-%m-%d} - {unit_label}", amount=payment.amount)]
        return [LineItem(name=f"Payment - {unit_label}", amount=payment.amount)]

    @staticmethod
    def _ensure_customer(gateway, tenant):
        if tenant.stripe_customer_id:
            return tenant.stripe_customer_id
        customer_id = gateway.create_customer(
            email=tenant.email,
            name=tenant.get_full_name(),
            metadata={"user_id": str(tenant.pk)},
        )
        if customer_id:
            User.objects.filter(pk=tenant.pk, stripe_customer_id="").update(stripe_customer_id=customer_id)
            tenant.stripe_customer_id = customer_id
        return customer_id

    @staticmethod
    def _release_checkout(payment_id):
        Payment.objects.filter(pk=payment_id, status=Payment.STATUS_PROCESSING).update(
            status=Payment.STATUS_PENDING,
            platform_fee=None,
            landlord_payout=None,
            updated_at=timezone.now(),
        )

    @staticmethod
    def initiate_checkout(payment_id, tenant, success_url=None, cancel_url=None):
        """
        Start a hosted checkout for a pending payment owned by ``tenant``.

        Moves the payment pending -> processing and returns the checkout URL.
        """
        try:
            payment = Payment.objects.select_related("lease__landlord", "unit").get(
                pk=payment_id, tenant=tenant
            )
        except Payment.DoesNotExist:
            raise NotFoundError("Payment not found.")

        if not fees.is_online_supported(payment.currency):
            raise ValidationError(
                f"Online payment is not available for {payment.currency}. "
                "Please pay your landlord directly using the manual payment instructions.",
                errors={"currency": payment.currency},
            )

        landlord = payment.lease.landlord
        destination = landlord.stripe_connected_account_id
        if not destination:
            raise InvalidStateError("The landlord has not set up online payouts yet.")

        if payment.status == Payment.STATUS_PROCESSING:
            raise ConflictError("A checkout for this payment is already in progress.")
        if payment.status != Payment.STATUS_PENDING:
            raise InvalidStateError(f"Payment is {payment.status}; only pending payments can be paid.")

        split = PaymentOrchestrator.fee_split_for(payment)
        claimed = Payment.objects.filter(pk=payment.pk, status=Payment.STATUS_PENDING).update(
            status=Payment.STATUS_PROCESSING,
            platform_fee=split.platform_fee,
            landlord_payout=split.landlord_payout,
            updated_at=timezone.now(),
        )
        if not claimed:
            raise ConflictError("A checkout for this payment is already in progress.")

        gateway = get_active_gateway()
        customer_id = PaymentOrchestrator._ensure_customer(gateway, tenant)
        if not customer_id:
            PaymentOrchestrator._release_checkout(payment.pk)
            raise PaymentProcessorError("Could not create a payment customer. Please try again.")

        result = gateway.create_checkout_session(
            line_items=PaymentOrchestrator._line_items(payment),
            currency=payment.currency,
            customer_id=customer_id,
            application_fee=split.platform_fee,
            destination_account_id=destination,
            success_url=success_url or get_absolute_url(f"/payments/{payment.pk}/success/"),
            cancel_url=cancel_url or get_absolute_url(f"/payments/{payment.pk}/cancelled/"),
            metadata={
                "payment_id": str(payment.pk),
                "lease_id": str(payment.lease_id),
                "type": payment.type,
            },
        )
        if not result.success:
            PaymentOrchestrator._release_checkout(payment.pk)
            raise PaymentProcessorError(result.error_message or "Checkout could not be started.")

        Payment.objects.filter(pk=payment.pk).update(checkout_session_id=result.session_id)
        logger.info(
            "Started checkout %s for payment %s (fee %s, payout %s)",
            result.session_id, payment.pk, split.platform_fee, split.landlord_payout,
        )
        return result.url

    @staticmethod
    def reopen(payment_id, tenant):
        """Return a failed payment to pending so the tenant can retry it."""
        if not Payment.objects.filter(pk=payment_id, tenant=tenant).exists():
            raise NotFoundError("Payment not found.")
        reopened = Payment.objects.filter(pk=payment_id, status=Payment.STATUS_FAILED).update(
            status=Payment.STATUS_PENDING,
            checkout_session_id="",
            updated_at=timezone.now(),
        )
        if not reopened:
            raise InvalidStateError("Only failed payments can be retried.")
        logger.info("Payment %s reopened for retry", payment_id)
        return Payment.objects.get(pk=payment_id)

    # ============================================
    # Processor events
    # ============================================

    @staticmethod
    def _get(payment_id):
        try:
            return Payment.objects.select_related("lease", "tenant", "unit").get(pk=payment_id)
        except Payment.DoesNotExist:
            raise NotFoundError(f"Payment {payment_id} not found.")

    @staticmethod
    def handle_payment_confirmed(payment_id, payment_intent_id="", transfer_id=""):
        """
        Record the processor's confirmation. Redelivery is a no-op, so
        ``paid_at`` is written exactly once.
        """
        PaymentOrchestrator._get(payment_id)
        now = timezone.now()
        with transaction.atomic():
            completed = Payment.objects.filter(pk=payment_id, status__in=CONFIRMABLE_STATUSES).update(
                status=Payment.STATUS_COMPLETED,
                paid_at=now,
                updated_at=now,
            )
            refs = {}
            if payment_intent_id:
                refs["payment_intent_id"] = payment_intent_id
            if transfer_id:
                refs["transfer_id"] = transfer_id
            if refs:
                Payment.objects.filter(pk=payment_id).update(**refs)
            payment = PaymentOrchestrator._get(payment_id)

            if not completed:
                logger.info("Payment %s already completed; confirmation ignored", payment_id)
                return payment

            logger.info("Payment %s completed (%s %s)", payment.pk, payment.amount, payment.currency)
            notify(
                payment.tenant,
                type="payment_received",
                title="Payment received",
                message=f"Your payment of {payment.amount} {payment.currency} was received. Thank you!",
                data={"payment_id": str(payment.pk)},
            )
            notify(
                payment.lease.landlord,
                type="payment_received",
                title="Payment received",
                message=(
                    f"{payment.tenant} paid {payment.amount} {payment.currency} "
                    f"for unit {payment.unit.unit_number}."
                ),
                data={"payment_id": str(payment.pk)},
            )
        return payment

    @staticmethod
    def handle_payment_failed(payment_id, reason=""):
        PaymentOrchestrator._get(payment_id)
        with transaction.atomic():
            failed = Payment.objects.filter(pk=payment_id, status=Payment.STATUS_PROCESSING).update(
                status=Payment.STATUS_FAILED,
                updated_at=timezone.now(),
            )
            payment = PaymentOrchestrator._get(payment_id)
            if not failed:
                logger.info("Payment %s is %s; failure event ignored", payment_id, payment.status)
                return payment

            logger.warning("Payment %s failed: %s", payment.pk, reason or "no reason given")
            notify(
                payment.tenant,
                type="payment_failed",
                title="Payment failed",
                message=f"Your payment of {payment.amount} {payment.currency} did not go through. "
                        "You can retry it from your payments page.",
                data={"payment_id": str(payment.pk), "reason": reason},
            )
        return payment

    @staticmethod
    def handle_checkout_expired(payment_id, session_id=None):
        """
        An abandoned checkout returns the payment to pending.

        With ``session_id`` only that session releases the payment, so a late
        expiry for an earlier session leaves a newer live checkout alone.
        """
        PaymentOrchestrator._get(payment_id)
        lookup = {"pk": payment_id, "status": Payment.STATUS_PROCESSING}
        if session_id is not None:
            lookup["checkout_session_id"] = session_id
        released = Payment.objects.filter(**lookup).update(
            status=Payment.STATUS_PENDING,
            checkout_session_id="",
            platform_fee=None,
            landlord_payout=None,
            updated_at=timezone.now(),
        )
        if released:
            logger.info("Checkout for payment %s expired; payment is pending again", payment_id)
        else:
            logger.info("Expiry of checkout %s ignored for payment %s", session_id, payment_id)
        return PaymentOrchestrator._get(payment_id)

    # ============================================
    # Connected accounts
    # ============================================

    @staticmethod
    def _provision_account(gateway, landlord):
        """Create the landlord's sub-account once and persist its id before returning."""
        with transaction.atomic():
            locked = User.objects.select_for_update().get(pk=landlord.pk)
            if locked.stripe_connected_account_id:
                landlord.stripe_connected_account_id = locked.stripe_connected_account_id
                landlord.stripe_connected_account_status = locked.stripe_connected_account_status
                return locked.stripe_connected_account_id

            result = gateway.create_connected_account(
                email=locked.email, metadata={"user_id": str(locked.pk)}
            )
            if not result.success:
                raise PaymentProcessorError(result.error_message or "Could not create a payout account.")

            locked.stripe_connected_account_id = result.account_id
            locked.stripe_connected_account_status = "pending"
            locked.save(update_fields=["stripe_connected_account_id", "stripe_connected_account_status"])
        landlord.stripe_connected_account_id = result.account_id
        landlord.stripe_connected_account_status = "pending"
        logger.info("Created connected account %s for landlord %s", result.account_id, landlord.pk)
        return result.account_id

    @staticmethod
    def ensure_connected_account(
        landlord, wait=True, poll_interval=None, timeout=None, sleep=time.sleep, clock=time.monotonic
    ):
        """
        Return the landlord's connected account id, creating it if needed.

        With ``wait`` the call polls the processor at a fixed interval until the
        account can receive transfers, raising ProvisioningTimeoutError after
        ``timeout`` seconds. The account id is kept either way, so a later call
        resumes polling instead of creating a second account.
        """
        gateway = get_active_gateway()
        account_id = PaymentOrchestrator._provision_account(gateway, landlord)
        if not wait or landlord.stripe_connected_account_status == "complete":
            return account_id

        interval = settings.STRIPE_CONNECT_POLL_INTERVAL if poll_interval is None else poll_interval
        timeout = settings.STRIPE_CONNECT_POLL_TIMEOUT if timeout is None else timeout
        deadline = clock() + timeout
        while True:
            account = gateway.get_connected_account(account_id)
            if account is not None and account.transfers_active:
                PaymentOrchestrator.sync_connected_account(
                    account_id, account.charges_enabled, account.payouts_enabled
                )
                landlord.refresh_from_db(fields=["stripe_connected_account_status"])
                return account_id
            if clock() >= deadline:
                logger.warning("Connected account %s not ready after %ss", account_id, timeout)
                raise ProvisioningTimeoutError(
                    "Your payout account is still being set up. Please try again shortly.",
                    account_id=account_id,
                )
            sleep(interval)

    @staticmethod
    def onboarding_link(landlord):
        """Hosted onboarding URL for the landlord's connected account."""
        account_id = PaymentOrchestrator.ensure_connected_account(landlord, wait=False)
        gateway = get_active_gateway()
        url = gateway.create_account_link(
            account_id,
            refresh_url=get_absolute_url("/landlord/payouts/refresh/"),
            return_url=get_absolute_url("/landlord/payouts/complete/"),
        )
        if not url:
            raise PaymentProcessorError("Could not start payout onboarding.")
        return url

    @staticmethod
    def sync_connected_account(account_id, charges_enabled, payouts_enabled):
        status = "complete" if charges_enabled and payouts_enabled else "pending"
        updated = User.objects.filter(stripe_connected_account_id=account_id).exclude(
            stripe_connected_account_status=status
        ).update(stripe_connected_account_status=status)
        if updated:
            logger.info("Connected account %s is now %s", account_id, status)
        return status
