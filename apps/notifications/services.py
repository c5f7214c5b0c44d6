"""
Lifecycle notifications.

Every lifecycle event that tells a person something goes through ``notify``.
Notifications are created only after the surrounding transaction commits, and
a failure to create or deliver one is logged without affecting the state
change that triggered it.
"""

import logging

from django.db import transaction

from .tasks import create_notification

logger = logging.getLogger(__name__)


def _deliver(kwargs):
    try:
        return create_notification(**kwargs)
    except Exception:
        logger.exception(
            "Failed to create %s notification for %s",
            kwargs.get("type"), kwargs.get("recipient_id") or kwargs.get("recipient_email"),
        )
        return None


def notify(recipient=None, *, title, message, type="system", email="", data=None, action_url=""):
    """Queue a notification to a user (or a bare email address) for after commit."""
    kwargs = {
        "title": title,
        "message": message,
        "recipient_id": str(recipient.pk) if recipient is not None else None,
        "recipient_email": email,
        "type": type,
        "data": data or {},
        "action_url": action_url,
    }
    transaction.on_commit(lambda: _deliver(kwargs))
