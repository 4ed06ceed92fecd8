from django.db import models
from django.conf import settings


class Notification(models.Model):
    """
    Fire-and-forget alert for clients, freelancers and admins.
    """

    NEW_PROPOSAL = "new_proposal"
    PROPOSAL_ACCEPTED = "proposal_accepted"
    PROPOSAL_REJECTED = "proposal_rejected"
    PAYMENT_FUNDED = "payment_funded"
    ESCROW_RELEASED = "escrow_released"
    ORDER_DELIVERED = "order_delivered"
    ORDER_COMPLETED = "order_completed"
    NEW_REVIEW = "new_review"
    VERIFICATION_APPROVED = "verification_approved"
    VERIFICATION_REJECTED = "verification_rejected"

    NOTIFICATION_TYPES = [
        (NEW_PROPOSAL, "New Proposal"),
        (PROPOSAL_ACCEPTED, "Proposal Accepted"),
        (PROPOSAL_REJECTED, "Proposal Rejected"),
        (PAYMENT_FUNDED, "Payment Funded"),
        (ESCROW_RELEASED, "Escrow Released"),
        (ORDER_DELIVERED, "Order Delivered"),
        (ORDER_COMPLETED, "Order Completed"),
        (NEW_REVIEW, "New Review"),
        (VERIFICATION_APPROVED, "Verification Approved"),
        (VERIFICATION_REJECTED, "Verification Rejected"),
    ]

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications"
    )

    notif_type = models.CharField(
        max_length=50,
        choices=NOTIFICATION_TYPES
    )

    message = models.TextField()

    # Frontend route to open, e.g. /projects/12/proposals
    link = models.CharField(max_length=255, blank=True, default="")

    # Optional metadata (store IDs like project_id, order_id)
    data = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read"]),
        ]

    def __str__(self):
        return f"Notification({self.recipient_id}, {self.notif_type})"
