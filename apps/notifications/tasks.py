import logging

from django.utils import timezone

logger = logging.getLogger(__name__)


def send_notification(notification_id):
    """
    Deliver a persisted notification by email.
    Called asynchronously via Django-Q2.
    """
    from apps.core.services.email import send_email

    from .models import Notification

    try:
        notification = Notification.objects.select_related("recipient").get(pk=notification_id)
    except Notification.DoesNotExist:
        logger.error("Notification %s does not exist.", notification_id)
        return False

    if notification.channel != "email":
        logger.info("In-app notification %s; no external dispatch needed.", notification_id)
        return True

    address = notification.email_address
    if not address:
        logger.warning("Notification %s has no email address.", notification_id)
        return False

    body = notification.message
    if notification.action_url:
        body = f"{body}\n\n{notification.action_url}"
    sent = send_email(
        subject=notification.title,
        message=body,
        recipient_list=[address],
        source=f"notification:{notification.type}",
    )
    if sent:
        Notification.objects.filter(pk=notification.pk).update(sent_at=timezone.now())
    return sent


def create_notification(
    title, message, recipient_id=None, recipient_email="", type="system",
    channel="email", data=None, action_url="",
):
    """
    Persist a Notification and dispatch email delivery via Django-Q2.
    """
    from apps.accounts.models import User

    from .models import Notification

    recipient = None
    if recipient_id:
        try:
            recipient = User.objects.get(pk=recipient_id)
        except User.DoesNotExist:
            logger.error("Cannot create notification; user %s does not exist.", recipient_id)
            return None

    notification = Notification.objects.create(
        recipient=recipient,
        recipient_email=recipient_email,
        type=type,
        channel=channel,
        title=title,
        message=message,
        data=data or {},
        action_url=action_url,
    )

    if channel == "email":
        try:
            from django_q.tasks import async_task

            async_task(
                "apps.notifications.tasks.send_notification",
                str(notification.pk),
                task_name=f"notify-{notification.pk}",
            )
        except Exception:
            logger.warning(
                "Django-Q2 unavailable; dispatching notification %s synchronously.", notification.pk
            )
            send_notification(str(notification.pk))

    return notification
