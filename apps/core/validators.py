import re

from django.core.exceptions import ValidationError

_PHONE_PATTERN = re.compile(r"^\+?\d{7,15}$")
_PHONE_SEPARATORS = re.compile(r"[\s().-]")


def validate_phone_number(value):
    if not _PHONE_PATTERN.match(_PHONE_SEPARATORS.sub("", value or "")):
        raise ValidationError("Enter a valid phone number (7-15 digits, optional + prefix).")


def validate_currency_code(value):
    if not re.fullmatch(r"[A-Z]{3}", value or ""):
        raise ValidationError("Currency must be a three-letter ISO 4217 code.")
