from django.conf import settings
from django.db import models
from django.utils import timezone


class ActivityLog(models.Model):
    """
    Admin audit trail. ``related_id`` holds the id of whatever the action
    touched (proposal, payment, verification request...).
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="activity_logs",
    )
    action = models.CharField(max_length=64)
    details = models.TextField(blank=True, default="")
    related_id = models.CharField(max_length=64, blank=True, default="")
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["action", "-timestamp"]),
        ]

    def __str__(self):
        return f"{self.action} by {self.user_id} at {self.timestamp:%Y-%m-%d %H:%M}"
