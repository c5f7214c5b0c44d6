import logging

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


def get_gateway_config():
    return {
        "secret_key": settings.STRIPE_SECRET_KEY,
        "webhook_secret": settings.STRIPE_WEBHOOK_SECRET,
        "account_type": settings.STRIPE_CONNECT_ACCOUNT_TYPE,
    }


def get_gateway_class(path=None):
    path = path or settings.PAYMENT_GATEWAY_BACKEND
    try:
        return import_string(path)
    except ImportError as e:
        raise ValueError(f"Unknown payment gateway backend: {path}") from e


def get_active_gateway():
    cls = get_gateway_class()
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY is empty; %s calls will fail", cls.__name__)
    return cls(get_gateway_config())
