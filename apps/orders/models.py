from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Order(models.Model):
    PENDING_PAYMENT = "pending_payment"
    ACTIVE = "active"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"

    STATUS_CHOICES = (
        (PENDING_PAYMENT, "Pending Payment"),
        (ACTIVE, "Active"),
        (IN_PROGRESS, "In Progress"),
        (DELIVERED, "Delivered"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
        (DISPUTED, "Disputed"),
    )

    # One order per accepted proposal
    proposal = models.OneToOneField(
        "proposals.Proposal",
        on_delete=models.PROTECT,
        related_name="order",
    )
    project = models.ForeignKey(
        "projects.ProjectRequest",
        on_delete=models.CASCADE,
        related_name="orders",
    )
    client = models.ForeignKey(User, on_delete=models.CASCADE, related_name="client_orders")
    freelancer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="freelancer_orders")

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=12, decimal_places=2)
    delivery_time = models.PositiveIntegerField(help_text="Delivery time in days")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING_PAYMENT)

    delivery_message = models.TextField(blank=True, default="")
    deliverables = models.ManyToManyField("storage.StoredFile", blank=True, related_name="+")
    delivered_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["client", "status"]),
            models.Index(fields=["freelancer", "status"]),
        ]

    def __str__(self):
        return f"Order #{self.id} | {self.title} ({self.status})"

    def is_party(self, user):
        return user.is_authenticated and user.id in (self.client_id, self.freelancer_id)

    def mark_delivered(self, message=""):
        if self.status != self.IN_PROGRESS:
            raise ValidationError("Only orders in progress can be delivered.")
        self.status = self.DELIVERED
        self.delivery_message = message
        self.delivered_at = timezone.now()
        self.save(update_fields=["status", "delivery_message", "delivered_at", "updated_at"])

    def mark_completed(self):
        if self.status != self.DELIVERED:
            raise ValidationError("Only delivered orders can be completed.")
        self.status = self.COMPLETED
        self.completed_at = timezone.now()
        self.save(update_fields=["status", "completed_at", "updated_at"])

    def cancel(self):
        if self.status != self.PENDING_PAYMENT:
            raise ValidationError("Only unpaid orders can be cancelled.")
        self.status = self.CANCELLED
        self.save(update_fields=["status", "updated_at"])


class Review(models.Model):
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name="review")
    reviewer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reviews_given")
    reviewee = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reviews_received")
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True, default="")
    is_public = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Review {self.rating}/5 on order {self.order_id}"
