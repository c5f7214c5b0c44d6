"""In-memory payment gateway used by the test settings."""

import json
from itertools import count

from apps.core.services.payments.base import (
    AccountResult,
    CheckoutResult,
    ConnectedAccount,
    PaymentGateway,
    WebhookEvent,
)


class FakeGateway(PaymentGateway):
    """
    Records every call on the class so tests can inspect what a fresh
    instance from ``get_active_gateway`` did. Call ``reset()`` in setUp.
    """

    calls = []
    accounts = {}
    # Reads of a new account before it reports transfers active
    activation_polls = 0
    fail_checkout = False
    fail_customer = False
    _ids = count(1)

    @classmethod
    def reset(cls, activation_polls=0):
        cls.calls = []
        cls.accounts = {}
        cls.activation_polls = activation_polls
        cls.fail_checkout = False
        cls.fail_customer = False
        cls._ids = count(1)

    @classmethod
    def calls_to(cls, name):
        return [kwargs for call, kwargs in cls.calls if call == name]

    def _record(self, _call, **kwargs):
        type(self).calls.append((_call, kwargs))

    def create_customer(self, email, name="", metadata=None):
        self._record("create_customer", email=email, name=name, metadata=metadata)
        if self.fail_customer:
            return None
        return f"cus_{next(self._ids)}"

    def create_connected_account(self, email, metadata=None):
        self._record("create_connected_account", email=email, metadata=metadata)
        account_id = f"acct_{next(self._ids)}"
        type(self).accounts[account_id] = {"polls": 0}
        return AccountResult(success=True, account_id=account_id)

    def get_connected_account(self, account_id):
        self._record("get_connected_account", account_id=account_id)
        state = self.accounts.get(account_id)
        if state is None:
            return None
        state["polls"] += 1
        ready = state["polls"] > self.activation_polls
        return ConnectedAccount(
            account_id=account_id,
            charges_enabled=ready,
            payouts_enabled=ready,
            transfers_active=ready,
            details_submitted=ready,
        )

    def create_account_link(self, account_id, refresh_url, return_url):
        self._record("create_account_link", account_id=account_id, refresh_url=refresh_url, return_url=return_url)
        return f"https://connect.example.test/setup/{account_id}"

    def create_checkout_session(
        self, *, line_items, currency, customer_id, application_fee,
        destination_account_id, success_url, cancel_url, metadata,
    ):
        self._record(
            "create_checkout_session",
            line_items=line_items,
            currency=currency,
            customer_id=customer_id,
            application_fee=application_fee,
            destination_account_id=destination_account_id,
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
        )
        if self.fail_checkout:
            return CheckoutResult(success=False, error_message="Card network unavailable")
        session_id = f"cs_test_{next(self._ids)}"
        return CheckoutResult(success=True, session_id=session_id, url=f"https://checkout.example.test/{session_id}")

    def verify_webhook(self, payload, signature):
        if signature != "valid":
            raise ValueError("Invalid signature")
        event = json.loads(payload)
        return WebhookEvent(
            event_id=event.get("id", ""),
            event_type=event.get("type", ""),
            data=event.get("data", {}).get("object", {}),
        )
