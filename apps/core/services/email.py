import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def send_email(subject, message, recipient_list, html_message=None, from_email=None, source=""):
    """Send a plain email. Returns False instead of raising when delivery fails."""
    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=from_email or settings.DEFAULT_FROM_EMAIL,
            recipient_list=recipient_list,
            html_message=html_message,
            fail_silently=False,
        )
        logger.info("Email sent: subject='%s', to=%s, source=%s", subject, recipient_list, source)
        return True
    except Exception:
        logger.exception("Failed to send email to %s", recipient_list)
        return False
