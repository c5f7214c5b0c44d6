import logging

from .base import (
    AccountResult,
    CheckoutResult,
    ConnectedAccount,
    PaymentGateway,
    WebhookEvent,
    to_minor_units,
)

logger = logging.getLogger(__name__)


class StripeGateway(PaymentGateway):
    def __init__(self, config=None):
        super().__init__(config)
        import stripe
        self.stripe = stripe
        self.stripe.api_key = self.config.get("secret_key", "")

    def create_customer(self, email, name="", metadata=None):
        try:
            customer = self.stripe.Customer.create(
                email=email,
                name=name or None,
                metadata=metadata or {},
            )
            return customer.id
        except Exception:
            logger.exception("Stripe customer creation failed for %s", email)
            return None

    def create_connected_account(self, email, metadata=None) -> AccountResult:
        account_type = self.config.get("account_type", "express")
        params = {
            "type": account_type,
            "email": email,
            "metadata": metadata or {},
            "capabilities": {
                "card_payments": {"requested": True},
                "transfers": {"requested": True},
            },
        }
        if account_type == "custom":
            params["business_type"] = "individual"
            params["tos_acceptance"] = {"service_agreement": "full"}
        try:
            account = self.stripe.Account.create(**params)
            return AccountResult(success=True, account_id=account.id)
        except Exception as e:
            logger.exception("Stripe connected account creation failed for %s", email)
            return AccountResult(success=False, error_message=str(e))

    def get_connected_account(self, account_id):
        try:
            account = self.stripe.Account.retrieve(account_id)
        except Exception:
            logger.exception("Stripe account lookup failed for %s", account_id)
            return None
        # StripeObject is not a dict on current SDKs
        data = account.to_dict()
        capabilities = data.get("capabilities") or {}
        return ConnectedAccount(
            account_id=account.id,
            charges_enabled=bool(data.get("charges_enabled")),
            payouts_enabled=bool(data.get("payouts_enabled")),
            transfers_active=capabilities.get("transfers") == "active",
            details_submitted=bool(data.get("details_submitted")),
        )

    def create_account_link(self, account_id, refresh_url, return_url):
        try:
            link = self.stripe.AccountLink.create(
                account=account_id,
                refresh_url=refresh_url,
                return_url=return_url,
                type="account_onboarding",
            )
            return link.url
        except Exception:
            logger.exception("Stripe account link creation failed for %s", account_id)
            return None

    def create_checkout_session(
        self,
        *,
        line_items,
        currency,
        customer_id,
        application_fee,
        destination_account_id,
        success_url,
        cancel_url,
        metadata,
    ) -> CheckoutResult:
        try:
            session = self.stripe.checkout.Session.create(
                mode="payment",
                customer=customer_id,
                line_items=[
                    {
                        "price_data": {
                            "currency": currency.lower(),
                            "product_data": {"name": item.name},
                            "unit_amount": to_minor_units(item.amount),
                        },
                        "quantity": item.quantity,
                    }
                    for item in line_items
                ],
                payment_intent_data={
                    "application_fee_amount": to_minor_units(application_fee),
                    "transfer_data": {"destination": destination_account_id},
                    "metadata": metadata,
                },
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
            )
            return CheckoutResult(success=True, session_id=session.id, url=session.url)
        except Exception as e:
            logger.exception("Stripe checkout session creation failed")
            return CheckoutResult(success=False, error_message=str(e))

    def verify_webhook(self, payload, signature) -> WebhookEvent:
        secret = self.config.get("webhook_secret", "")
        try:
            event = self.stripe.Webhook.construct_event(payload, signature, secret)
        except self.stripe.SignatureVerificationError as e:
            raise ValueError(f"Invalid Stripe signature: {e}") from e
        obj = event["data"]["object"]
        return WebhookEvent(
            event_id=event["id"],
            event_type=event["type"],
            data=obj.to_dict() if hasattr(obj, "to_dict") else dict(obj),
        )
