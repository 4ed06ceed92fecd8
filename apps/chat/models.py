from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Conversation(models.Model):
    project = models.ForeignKey(
        "projects.ProjectRequest",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="conversations",
    )
    client = models.ForeignKey(User, on_delete=models.CASCADE, related_name="client_conversations")
    freelancer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="freelancer_conversations")

    last_message = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "client", "freelancer"],
                name="unique_project_conversation",
            ),
            # NULL project ids never collide in the constraint above
            models.UniqueConstraint(
                fields=["client", "freelancer"],
                condition=Q(project__isnull=True),
                name="unique_direct_conversation",
            ),
        ]

    def __str__(self):
        return f"Conversation #{self.id} ({self.client_id} <> {self.freelancer_id})"

    def has_participant(self, user):
        return user.is_authenticated and user.id in (self.client_id, self.freelancer_id)

    def other_participant(self, user):
        return self.freelancer if user.id == self.client_id else self.client


class Message(models.Model):
    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name="sent_messages")
    text = models.TextField()
    seen = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["conversation", "created_at"]),
            models.Index(fields=["conversation", "seen"]),
        ]

    def __str__(self):
        return f"Message {self.id} in conversation {self.conversation_id}"
