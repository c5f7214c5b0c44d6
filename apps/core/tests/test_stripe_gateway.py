from decimal import Decimal
from unittest import mock

import stripe
from django.test import SimpleTestCase

from apps.core.services.payments.base import LineItem
from apps.core.services.payments.stripe import StripeGateway


class StripeGatewayTests(SimpleTestCase):
    def setUp(self):
        self.gateway = StripeGateway({"secret_key": "sk_test_x", "webhook_secret": "whsec_x"})

    def test_checkout_session_uses_destination_charge(self):
        session = mock.Mock(id="cs_1", url="https://checkout.stripe.com/c/cs_1")
        with mock.patch.object(stripe.checkout.Session, "create", return_value=session) as create:
            result = self.gateway.create_checkout_session(
                line_items=[LineItem("Rent", Decimal("1000.00")), LineItem("Deposit", Decimal("500.00"))],
                currency="USD",
                customer_id="cus_1",
                application_fee=Decimal("150.00"),
                destination_account_id="acct_1",
                success_url="https://app.example.test/ok",
                cancel_url="https://app.example.test/cancel",
                metadata={"payment_id": "p1"},
            )

        self.assertTrue(result.success)
        self.assertEqual(result.session_id, "cs_1")
        kwargs = create.call_args.kwargs
        self.assertEqual(kwargs["payment_intent_data"]["application_fee_amount"], 15000)
        self.assertEqual(kwargs["payment_intent_data"]["transfer_data"], {"destination": "acct_1"})
        self.assertEqual([li["price_data"]["unit_amount"] for li in kwargs["line_items"]], [100000, 50000])
        self.assertEqual(kwargs["line_items"][0]["price_data"]["currency"], "usd")

    def test_checkout_failure_is_reported(self):
        with mock.patch.object(stripe.checkout.Session, "create", side_effect=stripe.StripeError("boom")):
            result = self.gateway.create_checkout_session(
                line_items=[LineItem("Rent", Decimal("10.00"))],
                currency="usd",
                customer_id="cus_1",
                application_fee=Decimal("1.50"),
                destination_account_id="acct_1",
                success_url="s",
                cancel_url="c",
                metadata={},
            )
        self.assertFalse(result.success)
        self.assertIn("boom", result.error_message)

    def test_connected_account_state(self):
        account = stripe.Account.construct_from({
            "id": "acct_1",
            "charges_enabled": True,
            "payouts_enabled": False,
            "capabilities": {"transfers": "active"},
        }, "sk_test_x")
        with mock.patch.object(stripe.Account, "retrieve", return_value=account):
            state = self.gateway.get_connected_account("acct_1")
        self.assertTrue(state.transfers_active)
        self.assertFalse(state.onboarding_complete)

    def test_invalid_webhook_signature(self):
        error = stripe.SignatureVerificationError("bad signature", "t=1,v1=x")
        with mock.patch.object(stripe.Webhook, "construct_event", side_effect=error):
            with self.assertRaises(ValueError):
                self.gateway.verify_webhook(b"{}", "t=1,v1=x")
