import uuid
from datetime import timedelta
from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.storage.constants import UPLOAD_TICKET_TTL_MINUTES, stored_file_upload_path


class StoredFile(models.Model):
    """
    Opaque storage reference attached to document fields
    (profile picture, student ID, government ID, gig images, deliverables).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    file = models.FileField(upload_to=stored_file_upload_path)
    original_name = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100)
    size = models.PositiveIntegerField(default=0)

    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="stored_files",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.original_name} ({self.id})"

    @property
    def url(self):
        return self.file.url if self.file else None


def default_ticket_expiry():
    return timezone.now() + timedelta(minutes=UPLOAD_TICKET_TTL_MINUTES)


class UploadTicket(models.Model):
    """
    One-time token handed out by ``generate_upload_url``.
    """

    token = models.UUIDField(unique=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="upload_tickets",
    )
    expires_at = models.DateTimeField(default=default_ticket_expiry)
    used_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def is_usable(self):
        return self.used_at is None and self.expires_at > timezone.now()

    def consume(self):
        self.used_at = timezone.now()
        self.save(update_fields=["used_at"])
