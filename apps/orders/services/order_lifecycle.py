import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Avg, Count
from rest_framework.exceptions import PermissionDenied, ValidationError

from apps.audit.services.activity_logger import log_activity
from apps.notifications.models import Notification
from apps.notifications.services.create_notifications import notify_user
from apps.orders.models import Order, Review
from apps.projects.models import ProjectRequest
from apps.users.models import Profile

logger = logging.getLogger(__name__)


def _locked_order(order_id):
    return Order.objects.select_for_update().get(id=order_id)


def deliver_order(freelancer, order, message, deliverables=None):
    if order.freelancer_id != freelancer.id:
        raise PermissionDenied("Only the assigned freelancer can deliver this order.")

    with transaction.atomic():
        order = _locked_order(order.id)
        order.mark_delivered(message)
        if deliverables:
            order.deliverables.set(deliverables)

        notify_user(
            recipient=order.client,
            notif_type=Notification.ORDER_DELIVERED,
            message=f"'{order.title}' has been delivered. Please review the work.",
            link=f"/orders/{order.id}",
            data={"order_id": order.id},
        )
        log_activity(freelancer, "order_delivered", f"Delivered '{order.title}'", order.id)

    return order


def complete_order(client, order):
    if order.client_id != client.id:
        raise PermissionDenied("Only the client can complete this order.")

    with transaction.atomic():
        order = _locked_order(order.id)
        order.mark_completed()

        ProjectRequest.objects.filter(id=order.project_id).update(status=ProjectRequest.COMPLETED)

        notify_user(
            recipient=order.freelancer,
            notif_type=Notification.ORDER_COMPLETED,
            message=f"'{order.title}' was marked as completed.",
            link=f"/orders/{order.id}",
            data={"order_id": order.id},
        )
        log_activity(client, "order_completed", f"Completed '{order.title}'", order.id)

    return order


def cancel_order(client, order):
    if order.client_id != client.id:
        raise PermissionDenied("Only the client can cancel this order.")

    with transaction.atomic():
        order = _locked_order(order.id)
        order.cancel()
        log_activity(client, "order_cancelled", f"Cancelled '{order.title}'", order.id)

    return order


def recompute_rating(user):
    """
    Refresh the aggregate rating on a freelancer's profile from their reviews.
    """
    stats = Review.objects.filter(reviewee=user).aggregate(avg=Avg("rating"), total=Count("id"))

    average = stats["avg"]
    if average is not None:
        average = Decimal(str(average)).quantize(Decimal("0.01"))

    Profile.objects.filter(user=user).update(
        average_rating=average,
        total_reviews=stats["total"],
    )


def review_order(client, order, rating, comment="", is_public=True):
    if order.client_id != client.id:
        raise PermissionDenied("Only the client can review this order.")
    if order.status != Order.COMPLETED:
        raise ValidationError("Only completed orders can be reviewed.")
    if Review.objects.filter(order=order).exists():
        raise ValidationError("This order has already been reviewed.")

    with transaction.atomic():
        review = Review.objects.create(
            order=order,
            reviewer=client,
            reviewee=order.freelancer,
            rating=rating,
            comment=comment,
            is_public=is_public,
        )
        recompute_rating(order.freelancer)

        notify_user(
            recipient=order.freelancer,
            notif_type=Notification.NEW_REVIEW,
            message=f"You received a {rating}-star review for '{order.title}'",
            link=f"/orders/{order.id}",
            data={"order_id": order.id, "rating": rating},
        )

    logger.info("Order %s reviewed with rating %s", order.id, rating)
    return review
