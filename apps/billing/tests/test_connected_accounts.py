from django.test import TestCase

from apps.billing.services import PaymentOrchestrator
from apps.billing.tests.fakes import FakeGateway
from apps.core.exceptions import ProvisioningTimeoutError
from apps.core.tests.factories import make_landlord


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class EnsureConnectedAccountTests(TestCase):
    def setUp(self):
        FakeGateway.reset()
        self.landlord = make_landlord()
        self.clock = FakeClock()

    def ensure(self, **kwargs):
        kwargs.setdefault("poll_interval", 2)
        kwargs.setdefault("timeout", 30)
        return PaymentOrchestrator.ensure_connected_account(
            self.landlord, sleep=self.clock.sleep, clock=self.clock, **kwargs
        )

    def test_ready_account(self):
        account_id = self.ensure()

        self.landlord.refresh_from_db()
        self.assertEqual(self.landlord.stripe_connected_account_id, account_id)
        self.assertEqual(self.landlord.stripe_connected_account_status, "complete")
        self.assertEqual(self.clock.sleeps, [])

    def test_polls_at_fixed_interval_until_active(self):
        FakeGateway.reset(activation_polls=3)
        self.ensure()
        self.assertEqual(self.clock.sleeps, [2, 2, 2])
        self.assertEqual(len(FakeGateway.calls_to("get_connected_account")), 4)

    def test_timeout_keeps_account(self):
        FakeGateway.reset(activation_polls=1000)
        with self.assertRaises(ProvisioningTimeoutError) as ctx:
            self.ensure(timeout=10)

        self.landlord.refresh_from_db()
        account_id = self.landlord.stripe_connected_account_id
        self.assertTrue(account_id)
        self.assertEqual(ctx.exception.details["account_id"], account_id)
        self.assertEqual(self.landlord.stripe_connected_account_status, "pending")
        self.assertEqual(ctx.exception.status_code, 504)

    def test_retry_after_timeout_reuses_account(self):
        FakeGateway.reset(activation_polls=1000)
        with self.assertRaises(ProvisioningTimeoutError):
            self.ensure(timeout=4)
        first = self.landlord.stripe_connected_account_id

        FakeGateway.activation_polls = 0
        self.assertEqual(self.ensure(), first)
        self.assertEqual(len(FakeGateway.calls_to("create_connected_account")), 1)

    def test_without_waiting(self):
        FakeGateway.reset(activation_polls=1000)
        account_id = self.ensure(wait=False)
        self.assertTrue(account_id.startswith("acct_"))
        self.assertEqual(self.landlord.stripe_connected_account_status, "pending")
        self.assertEqual(FakeGateway.calls_to("get_connected_account"), [])

    def test_onboarding_link(self):
        url = PaymentOrchestrator.onboarding_link(self.landlord)
        self.assertEqual(url, f"https://connect.example.test/setup/{self.landlord.stripe_connected_account_id}")


class SyncConnectedAccountTests(TestCase):
    def test_status_follows_capabilities(self):
        landlord = make_landlord(stripe_connected_account_id="acct_9", stripe_connected_account_status="pending")

        self.assertEqual(PaymentOrchestrator.sync_connected_account("acct_9", True, False), "pending")
        self.assertEqual(PaymentOrchestrator.sync_connected_account("acct_9", True, True), "complete")
        landlord.refresh_from_db()
        self.assertEqual(landlord.stripe_connected_account_status, "complete")
