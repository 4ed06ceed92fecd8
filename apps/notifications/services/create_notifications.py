import logging
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from apps.notifications.models import Notification

logger = logging.getLogger(__name__)


def user_group_name(user_id):
    return f"user_{user_id}"


def notify_user(recipient, notif_type, message, link="", data=None, email=True):

    if data is None:
        data = {}

    notif = Notification.objects.create(
        recipient=recipient,
        notif_type=notif_type,
        message=message,
        link=link,
        data=data,
    )

    payload = {
        "type": "send_notification",
        "id": notif.id,
        "message": message,
        "notif_type": notif_type,
        "link": link,
        "data": data,
        "created_at": str(notif.created_at),
        "is_read": False,
    }

    # Push and email only once the surrounding transaction has committed
    transaction.on_commit(lambda: _push(recipient.id, payload))
    if email:
        from apps.notifications.tasks import send_notification_email
        transaction.on_commit(lambda: send_notification_email.delay(notif.id))

    return notif


def _push(user_id, payload):
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(user_group_name(user_id), payload)
    except Exception:
        # Realtime push is best effort; the row is already stored
        logger.exception("Failed to push notification %s to user %s", payload["id"], user_id)
