from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from apps.notifications.models import Notification


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=10,
    retry_kwargs={"max_retries": 3},
)
def send_notification_email(self, notification_id):
    try:
        notif = Notification.objects.select_related("recipient").get(id=notification_id)
    except Notification.DoesNotExist:
        return

    subject = f"[CollegeSkills] {notif.get_notif_type_display()}"
    body = notif.message
    if notif.link:
        body = f"{body}\n\n{settings.SITE_URL}{notif.link}"

    send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [notif.recipient.email])
