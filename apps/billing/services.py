import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from apps.audit.services.activity_logger import log_activity
from apps.notifications.models import Notification
from apps.notifications.services.create_notifications import notify_user
from apps.orders.models import Order
from apps.projects.models import ProjectRequest
from apps.proposals.models import Proposal
from apps.users.models import Profile
from .exceptions import PayoutAccountMissing
from .gateway import get_gateway, to_paise
from .models import Payment

logger = logging.getLogger(__name__)

CAPTURED_EVENT = "payment.captured"


class EscrowService:

    @staticmethod
    def open_gateway_order(user, order_id):
        """
        Open a Razorpay order for an unpaid marketplace order and record a
        ``pending`` Payment keyed by the gateway order id.
        """
        order = Order.objects.filter(id=order_id).first()
        if order is None:
            raise NotFound("Order not found")
        if order.client_id != user.id:
            raise PermissionDenied("Only the client can pay for this order.")
        if order.status != Order.PENDING_PAYMENT:
            raise ValidationError("Order is not awaiting payment.")
        if order.payments.filter(status__in=(Payment.PENDING, Payment.FUNDED)).exists():
            raise ValidationError("A payment is already open for this order.")

        gateway = get_gateway()
        gateway_order = gateway.create_order(
            order.price,
            receipt=order.id,
            notes={"order_id": str(order.id), "project_id": str(order.project_id)},
        )

        payment = Payment.objects.create(
            order=order,
            razorpay_order_id=gateway_order["id"],
            amount=order.price,
            currency=gateway.currency,
            status=Payment.PENDING,
        )
        log_activity(user, "payment_initiated", f"Razorpay order {payment.razorpay_order_id}", order.id)
        logger.info("Opened Razorpay order %s for order %s", payment.razorpay_order_id, order.id)

        return {
            "payment_id": payment.id,
            "razorpay_order_id": payment.razorpay_order_id,
            "amount": to_paise(payment.amount),
            "currency": payment.currency,
            "key_id": gateway.key_id,
        }

    @staticmethod
    def mark_as_funded(razorpay_order_id, transfer_id=None, razorpay_payment_id=None):
        """
        Settle a captured payment. This is the only place a single proposal
        wins its project; replays are no-ops once the payment left ``pending``.
        """
        with transaction.atomic():
            payment = (
                Payment.objects.select_for_update()
                .filter(razorpay_order_id=razorpay_order_id)
                .first()
            )
            if payment is None:
                logger.warning("No payment recorded for Razorpay order %s", razorpay_order_id)
                return None

            if payment.status != Payment.PENDING:
                logger.info(
                    "Payment %s already %s, ignoring capture replay", payment.id, payment.status
                )
                return payment

            order = Order.objects.select_for_update().get(id=payment.order_id)
            proposal = Proposal.objects.select_for_update().get(id=order.proposal_id)
            project = ProjectRequest.objects.select_for_update().get(id=order.project_id)

            payment.status = Payment.FUNDED
            payment.funded_at = timezone.now()
            if transfer_id:
                payment.razorpay_transfer_id = transfer_id
            if razorpay_payment_id:
                payment.razorpay_payment_id = razorpay_payment_id
            payment.save()

            if order.status != Order.PENDING_PAYMENT and proposal.status != Proposal.REJECTED:
                # Capture for an order that is no longer awaiting payment; refunded by hand
                logger.warning(
                    "Duplicate payment %s funded for order %s (status %s)",
                    payment.id, order.id, order.status,
                )
                notify_user(
                    recipient=order.client,
                    notif_type=Notification.PAYMENT_FUNDED,
                    message=f"An extra payment for '{order.title}' was received. It will be refunded.",
                    link=f"/orders/{order.id}",
                    data={"order_id": order.id, "payment_id": payment.id, "duplicate": True},
                )
                return payment

            if proposal.status == Proposal.REJECTED or project.status != ProjectRequest.OPEN:
                # Funds landed for a proposal that already lost; needs a manual refund
                order.status = Order.DISPUTED
                order.save(update_fields=["status", "updated_at"])
                logger.warning(
                    "Payment %s funded for closed proposal %s; order %s disputed",
                    payment.id, proposal.id, order.id,
                )
                notify_user(
                    recipient=order.client,
                    notif_type=Notification.PAYMENT_FUNDED,
                    message=f"Payment for '{order.title}' was received after the project closed. It will be refunded.",
                    link=f"/orders/{order.id}",
                    data={"order_id": order.id, "payment_id": payment.id, "disputed": True},
                )
                return payment

            order.status = Order.IN_PROGRESS
            order.save(update_fields=["status", "updated_at"])

            proposal.status = Proposal.ACCEPTED
            proposal.save(update_fields=["status", "updated_at"])

            project.status = ProjectRequest.IN_PROGRESS
            project.selected_freelancer_id = order.freelancer_id
            project.save(update_fields=["status", "selected_freelancer", "updated_at"])

            losing = list(
                Proposal.objects.filter(project=project, status__in=Proposal.OPEN_STATUSES)
                .exclude(id=proposal.id)
                .select_related("freelancer")
            )
            Proposal.objects.filter(id__in=[p.id for p in losing]).update(status=Proposal.REJECTED)
            Order.objects.filter(
                proposal_id__in=[p.id for p in losing],
                status=Order.PENDING_PAYMENT,
            ).update(status=Order.CANCELLED)

            for sibling in losing:
                notify_user(
                    recipient=sibling.freelancer,
                    notif_type=Notification.PROPOSAL_REJECTED,
                    message=f"Another freelancer was hired for '{project.title}'.",
                    link=f"/projects/{project.id}",
                    data={"proposal_id": sibling.id},
                    email=False,
                )

            for recipient in (order.client, order.freelancer):
                notify_user(
                    recipient=recipient,
                    notif_type=Notification.PAYMENT_FUNDED,
                    message=f"Payment for '{order.title}' is held in escrow. Work can begin.",
                    link=f"/orders/{order.id}",
                    data={"order_id": order.id, "payment_id": payment.id},
                )

            log_activity(
                order.client,
                "payment_funded",
                f"Escrow funded via {razorpay_order_id}",
                order.id,
            )

        logger.info("Payment %s funded; order %s in progress", payment.id, order.id)
        return payment

    @staticmethod
    def release_escrow(user, payment_id):
        """
        Pay a funded escrow out to the freelancer's linked account. The payment
        row stays locked across the transfer so concurrent releases serialize.
        """
        with transaction.atomic():
            payment = (
                Payment.objects.select_for_update()
                .select_related("order")
                .filter(id=payment_id)
                .first()
            )
            if payment is None:
                raise NotFound("Payment not found")

            order = payment.order
            if user.id != order.client_id and not user.is_platform_admin:
                raise PermissionDenied("Only the client or an admin can release escrow.")
            if payment.status != Payment.FUNDED:
                raise ValidationError("Only funded payments can be released.")
            if order.status in (Order.DISPUTED, Order.CANCELLED):
                raise ValidationError(f"Escrow cannot be released for a {order.status} order.")
            if order.payments.filter(status=Payment.RELEASED).exists():
                raise ValidationError("Escrow for this order has already been released.")

            profile = Profile.objects.filter(user_id=order.freelancer_id).first()
            if profile is None or not profile.razorpay_account_id:
                raise PayoutAccountMissing()

            transfer = get_gateway().transfer(
                profile.razorpay_account_id,
                payment.amount,
                notes={"order_id": str(order.id), "payment_id": str(payment.id)},
            )

            payment.status = Payment.RELEASED
            payment.released_at = timezone.now()
            if transfer.get("id"):
                payment.razorpay_transfer_id = transfer["id"]
            payment.save()

            notify_user(
                recipient=order.freelancer,
                notif_type=Notification.ESCROW_RELEASED,
                message=f"Funds for '{order.title}' have been released to your account.",
                link=f"/orders/{order.id}",
                data={"order_id": order.id, "payment_id": payment.id},
            )
            log_activity(user, "escrow_released", f"Released payment {payment.id}", order.id)

        logger.info("Released payment %s to account %s", payment.id, profile.razorpay_account_id)
        return payment

    @staticmethod
    def onboard_freelancer(user):
        profile = Profile.objects.filter(user=user).first()
        if profile is None or not profile.is_freelancer:
            raise PermissionDenied("Only freelancers can connect a payout account.")
        if profile.razorpay_account_id:
            return profile.razorpay_account_id

        account = get_gateway().create_linked_account(user.email, profile.full_name or user.username)

        profile.razorpay_account_id = account["id"]
        profile.save(update_fields=["razorpay_account_id", "updated_at"])
        log_activity(user, "payout_account_connected", f"Linked account {account['id']}")
        return profile.razorpay_account_id

    @staticmethod
    def handle_webhook_event(event):
        """
        Dispatch a verified webhook payload. Unknown events are ignored.
        """
        if event.get("event") != CAPTURED_EVENT:
            logger.debug("Ignoring Razorpay event %s", event.get("event"))
            return None

        entity = event["payload"]["payment"]["entity"]
        razorpay_payment_id = entity.get("id")
        razorpay_order_id = entity.get("order_id")

        transfer_id = None
        try:
            transfer_id = get_gateway().fetch_transfer_id(razorpay_payment_id)
        except Exception:
            logger.exception("Could not fetch transfers for payment %s", razorpay_payment_id)

        return EscrowService.mark_as_funded(
            razorpay_order_id,
            transfer_id=transfer_id,
            razorpay_payment_id=razorpay_payment_id,
        )
