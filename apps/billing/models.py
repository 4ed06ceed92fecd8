from django.db import models
from django.utils import timezone


class Payment(models.Model):
    PENDING = "pending"
    FUNDED = "funded"
    RELEASED = "released"
    REFUNDED = "refunded"

    STATUS_CHOICES = (
        (PENDING, "Pending"),
        (FUNDED, "Funded (escrow)"),
        (RELEASED, "Released"),
        (REFUNDED, "Refunded"),
    )

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="payments",
    )

    razorpay_order_id = models.CharField(max_length=64, unique=True)
    razorpay_payment_id = models.CharField(max_length=64, blank=True, default="")
    razorpay_transfer_id = models.CharField(max_length=64, blank=True, default="")

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default="INR")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)

    created_at = models.DateTimeField(default=timezone.now)
    funded_at = models.DateTimeField(null=True, blank=True)
    released_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["order"]),
        ]

    def __str__(self):
        return f"Payment {self.razorpay_order_id} | Order #{self.order_id} | {self.status}"
