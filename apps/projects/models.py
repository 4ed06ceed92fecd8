from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class ProjectRequest(models.Model):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    STATUS_CHOICES = (
        (OPEN, "Open"),
        (IN_PROGRESS, "In Progress"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
    )

    client = models.ForeignKey(User, on_delete=models.CASCADE, related_name="project_requests")

    title = models.CharField(max_length=255)
    description = models.TextField()
    category = models.CharField(max_length=100, blank=True, default="")

    budget_min = models.DecimalField(max_digits=12, decimal_places=2)
    budget_max = models.DecimalField(max_digits=12, decimal_places=2)
    deadline = models.DateField()
    skills = models.JSONField(default=list, blank=True)
    attachments = models.ManyToManyField("storage.StoredFile", blank=True, related_name="+")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=OPEN)
    selected_freelancer = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="won_projects",
    )
    proposal_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["client", "status"]),
            models.Index(fields=["category"]),
        ]

    def clean(self):
        if self.budget_min is None or self.budget_max is None:
            raise ValidationError("Budget range is required.")
        if self.budget_min <= 0:
            raise ValidationError("Minimum budget must be positive.")
        if self.budget_min > self.budget_max:
            raise ValidationError("Minimum budget cannot exceed maximum budget.")

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def is_open(self):
        return self.status == self.OPEN
