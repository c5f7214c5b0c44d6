from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


def to_minor_units(amount) -> int:
    """Convert a 2-dp Decimal amount to integer cents."""
    return int((Decimal(amount) * 100).to_integral_value())


@dataclass
class LineItem:
    name: str
    amount: Decimal
    quantity: int = 1


@dataclass
class CheckoutResult:
    success: bool
    session_id: Optional[str] = None
    url: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class AccountResult:
    success: bool
    account_id: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class ConnectedAccount:
    account_id: str
    charges_enabled: bool = False
    payouts_enabled: bool = False
    transfers_active: bool = False
    details_submitted: bool = False

    @property
    def onboarding_complete(self):
        return self.charges_enabled and self.payouts_enabled


@dataclass
class WebhookEvent:
    event_id: str
    event_type: str
    data: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    """
    Payment processor operations needed for split payments.

    Money moves from the tenant to the platform and is forwarded to the
    landlord's connected sub-account minus the platform fee.
    """

    def __init__(self, config=None):
        self.config = config or {}

    @abstractmethod
    def create_customer(self, email, name="", metadata=None) -> Optional[str]:
        ...

    @abstractmethod
    def create_connected_account(self, email, metadata=None) -> AccountResult:
        ...

    @abstractmethod
    def get_connected_account(self, account_id) -> Optional[ConnectedAccount]:
        """Return the account's capability state, or None if it cannot be read right now."""
        ...

    @abstractmethod
    def create_account_link(self, account_id, refresh_url, return_url) -> Optional[str]:
        ...

    @abstractmethod
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
        ...

    @abstractmethod
    def verify_webhook(self, payload, signature) -> WebhookEvent:
        """Verify the webhook signature and parse the event.

        Raises ValueError if the signature or payload is invalid.
        """
        ...
