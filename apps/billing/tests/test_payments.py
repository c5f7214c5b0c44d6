from datetime import date
from decimal import Decimal

from django.test import TestCase

from apps.billing.models import Payment
from apps.billing.services import PaymentOrchestrator
from apps.billing.tests.fakes import FakeGateway
from apps.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PaymentProcessorError,
    ValidationError,
)
from apps.core.tests.factories import make_landlord, make_lease, make_unit, make_user
from apps.notifications.models import Notification


class PaymentTestCase(TestCase):
    def setUp(self):
        FakeGateway.reset()
        self.landlord = make_landlord(stripe_connected_account_id="acct_ready")
        self.unit = make_unit(owner=self.landlord)
        self.lease = make_lease(unit=self.unit, lease_start=date(2025, 3, 1))
        self.tenant = self.lease.tenant
        self.payment = PaymentOrchestrator.create_move_in_payment(self.lease)


class CreatePaymentTests(PaymentTestCase):
    def test_move_in_payment(self):
        self.assertEqual(self.payment.type, Payment.TYPE_MOVE_IN)
        self.assertEqual(self.payment.amount, Decimal("1500.00"))
        self.assertEqual(self.payment.status, Payment.STATUS_PENDING)
        self.assertEqual(self.payment.due_date, date(2025, 3, 1))
        self.assertEqual(self.payment.notes, {"rentAmount": "1000.00", "securityDeposit": "500.00"})
        self.assertEqual(self.payment.tenant, self.tenant)

    def test_move_in_without_deposit(self):
        lease = make_lease(unit=make_unit(owner=self.landlord, security_deposit="0.00"))
        payment = PaymentOrchestrator.create_move_in_payment(lease)
        self.assertEqual(payment.amount, Decimal("1000.00"))
        self.assertEqual(payment.notes, {"rentAmount": "1000.00"})
        self.assertEqual(payment.deposit_portion, Decimal("0"))

    def test_nothing_to_collect(self):
        lease = make_lease(unit=make_unit(owner=self.landlord, monthly_rent="0.00", security_deposit="0.00"))
        self.assertIsNone(PaymentOrchestrator.create_move_in_payment(lease))
        self.assertFalse(Payment.objects.filter(lease=lease).exists())

    def test_rent_payment_created_once(self):
        first = PaymentOrchestrator.create_rent_payment(self.lease, date(2025, 4, 1))
        second = PaymentOrchestrator.create_rent_payment(self.lease, date(2025, 4, 1))
        self.assertIsNotNone(first)
        self.assertIsNone(second)
        self.assertEqual(first.amount, Decimal("1000.00"))


class CheckoutTests(PaymentTestCase):
    def test_checkout_moves_payment_to_processing(self):
        url = PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)

        self.assertTrue(url.startswith("https://checkout.example.test/"))
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_PROCESSING)
        self.assertEqual(self.payment.platform_fee, Decimal("150.00"))
        self.assertEqual(self.payment.landlord_payout, Decimal("1350.00"))
        self.assertTrue(self.payment.checkout_session_id.startswith("cs_test_"))

        [session] = FakeGateway.calls_to("create_checkout_session")
        self.assertEqual(session["application_fee"], Decimal("150.00"))
        self.assertEqual(session["destination_account_id"], "acct_ready")
        self.assertEqual(session["metadata"]["payment_id"], str(self.payment.pk))
        self.assertEqual([item.amount for item in session["line_items"]], [Decimal("1000.00"), Decimal("500.00")])

    def test_customer_created_once(self):
        PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)
        self.tenant.refresh_from_db()
        self.assertTrue(self.tenant.stripe_customer_id.startswith("cus_"))

        rent = PaymentOrchestrator.create_rent_payment(self.lease, date(2025, 4, 1))
        PaymentOrchestrator.initiate_checkout(rent.pk, self.tenant)
        self.assertEqual(len(FakeGateway.calls_to("create_customer")), 1)

    def test_customer_gets_tenant_name(self):
        PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)
        [customer] = FakeGateway.calls_to("create_customer")
        self.assertEqual(customer["email"], self.tenant.email)
        self.assertEqual(customer["name"], self.tenant.get_full_name())

    def test_completed_payment_cannot_be_paid_again(self):
        PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)
        PaymentOrchestrator.handle_payment_confirmed(self.payment.pk)
        with self.assertRaises(InvalidStateError):
            PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)

    def test_second_checkout_rejected(self):
        PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)
        with self.assertRaises(ConflictError):
            PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)
        self.assertEqual(len(FakeGateway.calls_to("create_checkout_session")), 1)

    def test_other_tenant_cannot_pay(self):
        with self.assertRaises(NotFoundError):
            PaymentOrchestrator.initiate_checkout(self.payment.pk, make_user())

    def test_unsupported_currency(self):
        lease = make_lease(unit=make_unit(owner=self.landlord, currency="EUR"))
        payment = PaymentOrchestrator.create_move_in_payment(lease)
        with self.assertRaises(ValidationError):
            PaymentOrchestrator.initiate_checkout(payment.pk, lease.tenant)
        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.STATUS_PENDING)
        self.assertEqual(FakeGateway.calls, [])

    def test_landlord_without_payout_account(self):
        lease = make_lease(unit=make_unit())
        payment = PaymentOrchestrator.create_move_in_payment(lease)
        with self.assertRaises(InvalidStateError):
            PaymentOrchestrator.initiate_checkout(payment.pk, lease.tenant)
        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.STATUS_PENDING)

    def test_processor_failure_releases_payment(self):
        FakeGateway.fail_checkout = True
        with self.assertRaises(PaymentProcessorError):
            PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_PENDING)
        self.assertIsNone(self.payment.platform_fee)


class ProcessorEventTests(PaymentTestCase):
    def setUp(self):
        super().setUp()
        PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)

    def test_confirmation_completes_once(self):
        with self.captureOnCommitCallbacks(execute=True):
            payment = PaymentOrchestrator.handle_payment_confirmed(self.payment.pk, payment_intent_id="pi_1")
        self.assertEqual(payment.status, Payment.STATUS_COMPLETED)
        self.assertIsNotNone(payment.paid_at)
        self.assertEqual(payment.payment_intent_id, "pi_1")
        paid_at = payment.paid_at

        with self.captureOnCommitCallbacks(execute=True):
            again = PaymentOrchestrator.handle_payment_confirmed(self.payment.pk, payment_intent_id="pi_1")
        self.assertEqual(again.paid_at, paid_at)
        self.assertEqual(Notification.objects.filter(type="payment_received").count(), 2)

    def test_failure_then_retry(self):
        with self.captureOnCommitCallbacks(execute=True):
            failed = PaymentOrchestrator.handle_payment_failed(self.payment.pk, reason="card_declined")
        self.assertEqual(failed.status, Payment.STATUS_FAILED)
        self.assertTrue(Notification.objects.filter(recipient=self.tenant, type="payment_failed").exists())

        reopened = PaymentOrchestrator.reopen(self.payment.pk, self.tenant)
        self.assertEqual(reopened.status, Payment.STATUS_PENDING)
        self.assertEqual(reopened.checkout_session_id, "")

    def test_late_confirmation_after_failure(self):
        PaymentOrchestrator.handle_payment_failed(self.payment.pk)
        payment = PaymentOrchestrator.handle_payment_confirmed(self.payment.pk)
        self.assertEqual(payment.status, Payment.STATUS_COMPLETED)

    def test_failure_after_completion_ignored(self):
        PaymentOrchestrator.handle_payment_confirmed(self.payment.pk)
        payment = PaymentOrchestrator.handle_payment_failed(self.payment.pk)
        self.assertEqual(payment.status, Payment.STATUS_COMPLETED)

    def test_reopen_requires_failed(self):
        with self.assertRaises(InvalidStateError):
            PaymentOrchestrator.reopen(self.payment.pk, self.tenant)

    def test_expired_checkout_returns_to_pending(self):
        payment = PaymentOrchestrator.handle_checkout_expired(self.payment.pk)
        self.assertEqual(payment.status, Payment.STATUS_PENDING)
        self.assertEqual(payment.checkout_session_id, "")

    def test_unknown_payment(self):
        with self.assertRaises(NotFoundError):
            PaymentOrchestrator.handle_payment_confirmed("00000000-0000-0000-0000-000000000000")

    def test_expiry_of_current_session(self):
        self.payment.refresh_from_db()
        payment = PaymentOrchestrator.handle_checkout_expired(
            self.payment.pk, session_id=self.payment.checkout_session_id
        )
        self.assertEqual(payment.status, Payment.STATUS_PENDING)

    def test_stale_expiry_leaves_new_checkout_open(self):
        self.payment.refresh_from_db()
        first_session = self.payment.checkout_session_id
        PaymentOrchestrator.handle_payment_failed(self.payment.pk)
        PaymentOrchestrator.reopen(self.payment.pk, self.tenant)
        PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)

        payment = PaymentOrchestrator.handle_checkout_expired(self.payment.pk, session_id=first_session)

        self.assertEqual(payment.status, Payment.STATUS_PROCESSING)
        self.assertNotEqual(payment.checkout_session_id, first_session)
        with self.assertRaises(ConflictError):
            PaymentOrchestrator.initiate_checkout(self.payment.pk, self.tenant)
        self.assertEqual(len(FakeGateway.calls_to("create_checkout_session")), 2)


class GenerateRentPaymentTests(PaymentTestCase):
    def test_due_later_this_month(self):
        self.lease.rent_due_day = 20
        self.lease.save(update_fields=["rent_due_day"])

        payment = PaymentOrchestrator.generate_rent_payment(self.tenant.pk, today=date(2025, 3, 15))

        self.assertEqual(payment.type, Payment.TYPE_RENT)
        self.assertEqual(payment.due_date, date(2025, 3, 20))
        self.assertEqual(payment.amount, Decimal("1000.00"))
        self.assertEqual(payment.status, Payment.STATUS_PENDING)

    def test_due_day_passed_rolls_to_next_month(self):
        payment = PaymentOrchestrator.generate_rent_payment(self.tenant.pk, today=date(2025, 3, 15))
        self.assertEqual(payment.due_date, date(2025, 4, 1))

    def test_due_day_clamped_to_short_month(self):
        self.lease.rent_due_day = 31
        self.lease.save(update_fields=["rent_due_day"])
        payment = PaymentOrchestrator.generate_rent_payment(self.tenant.pk, today=date(2025, 4, 2))
        self.assertEqual(payment.due_date, date(2025, 4, 30))

    def test_duplicate_due_date(self):
        PaymentOrchestrator.generate_rent_payment(self.tenant.pk, today=date(2025, 3, 15))
        with self.assertRaises(ConflictError):
            PaymentOrchestrator.generate_rent_payment(self.tenant.pk, today=date(2025, 3, 20))

    def test_tenant_without_lease(self):
        with self.assertRaises(NotFoundError):
            PaymentOrchestrator.generate_rent_payment(make_user().pk)
