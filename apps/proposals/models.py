from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Proposal(models.Model):
    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    STATUS_CHOICES = (
        (PENDING, "Pending"),
        (PAYMENT_PENDING, "Payment Pending"),
        (ACCEPTED, "Accepted"),
        (REJECTED, "Rejected"),
    )

    # A freelancer holds at most one proposal in these states per project
    ACTIVE_STATUSES = (PENDING, PAYMENT_PENDING, ACCEPTED)
    OPEN_STATUSES = (PENDING, PAYMENT_PENDING)

    project = models.ForeignKey(
        "projects.ProjectRequest",
        on_delete=models.CASCADE,
        related_name="proposals",
    )
    freelancer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="proposals")

    cover_letter = models.TextField()
    proposed_price = models.DecimalField(max_digits=12, decimal_places=2)
    delivery_time = models.PositiveIntegerField(help_text="Delivery time in days")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "freelancer"],
                condition=Q(status__in=["pending", "payment_pending", "accepted"]),
                name="unique_active_proposal_per_freelancer",
            ),
        ]
        indexes = [
            models.Index(fields=["project", "status"]),
            models.Index(fields=["freelancer"]),
        ]

    def clean(self):
        if self.proposed_price is not None and self.proposed_price <= 0:
            raise ValidationError("Proposed price must be positive.")
        if self.delivery_time is not None and self.delivery_time < 1:
            raise ValidationError("Delivery time must be at least one day.")

    def __str__(self):
        return f"Proposal #{self.id} on project {self.project_id} ({self.status})"

    def mark_payment_pending(self):
        if self.status != self.PENDING:
            raise ValidationError("Only pending proposals can be accepted.")
        self.status = self.PAYMENT_PENDING
        self.save(update_fields=["status", "updated_at"])

    def reject(self):
        if self.status not in self.OPEN_STATUSES:
            raise ValidationError("Proposal can no longer be rejected.")
        self.status = self.REJECTED
        self.save(update_fields=["status", "updated_at"])
