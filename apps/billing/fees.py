"""
Platform fee arithmetic.

All amounts are ``Decimal`` rounded to cents with ROUND_HALF_UP, so
``platform_fee + landlord_payout`` always equals the charged amount exactly.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

from apps.core.exceptions import ValidationError

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class FeeSplit:
    platform_fee: Decimal
    landlord_payout: Decimal

    @property
    def total(self):
        return self.platform_fee + self.landlord_payout


def compute_fee(rent_amount, percent=None) -> FeeSplit:
    rent = to_money(rent_amount)
    if rent < 0:
        raise ValidationError("Amount must not be negative.", errors={"amount": str(rent_amount)})
    percent = settings.PLATFORM_FEE_PERCENT if percent is None else Decimal(str(percent))
    fee = (rent * percent / Decimal("100")).quantize(CENTS, rounding=ROUND_HALF_UP)
    return FeeSplit(platform_fee=fee, landlord_payout=rent - fee)


def compute_move_in_split(rent_amount, security_deposit, percent=None) -> FeeSplit:
    """The fee applies to the rent portion only; the deposit goes to the landlord in full."""
    deposit = to_money(security_deposit)
    if deposit < 0:
        raise ValidationError(
            "Security deposit must not be negative.", errors={"securityDeposit": str(security_deposit)}
        )
    rent_split = compute_fee(rent_amount, percent)
    return FeeSplit(
        platform_fee=rent_split.platform_fee,
        landlord_payout=rent_split.landlord_payout + deposit,
    )


def is_online_supported(currency) -> bool:
    allowed = {c.upper() for c in settings.ONLINE_PAYMENT_CURRENCIES}
    return bool(currency) and currency.upper() in allowed
