import logging

from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from apps.audit.services.activity_logger import log_activity
from apps.notifications.models import Notification
from apps.notifications.services.create_notifications import notify_user
from apps.orders.models import Order
from apps.projects.models import ProjectRequest
from apps.proposals.models import Proposal

logger = logging.getLogger(__name__)


def submit_proposal(freelancer, project_id, cover_letter, proposed_price, delivery_time):
    """
    Insert a ``pending`` proposal and bump the project's proposal counter.
    """
    with transaction.atomic():
        project = ProjectRequest.objects.select_for_update().filter(id=project_id).first()
        if project is None:
            raise NotFound("Project not found")
        if not project.is_open:
            raise ValidationError({"project": "Project is not accepting proposals"})
        if project.client_id == freelancer.id:
            raise PermissionDenied("You cannot submit a proposal on your own project.")

        already_active = Proposal.objects.filter(
            project=project,
            freelancer=freelancer,
            status__in=Proposal.ACTIVE_STATUSES,
        ).exists()
        if already_active:
            raise ValidationError("You already have an active proposal for this project.")

        proposal = Proposal.objects.create(
            project=project,
            freelancer=freelancer,
            cover_letter=cover_letter,
            proposed_price=proposed_price,
            delivery_time=delivery_time,
            status=Proposal.PENDING,
        )

        ProjectRequest.objects.filter(id=project.id).update(
            proposal_count=F("proposal_count") + 1
        )

        notify_user(
            recipient=project.client,
            notif_type=Notification.NEW_PROPOSAL,
            message=f"New proposal received for '{project.title}'",
            link=f"/projects/{project.id}/proposals",
            data={"project_id": project.id, "proposal_id": proposal.id},
        )
        log_activity(freelancer, "proposal_submitted", f"Proposal on '{project.title}'", proposal.id)

    logger.info("Proposal %s submitted on project %s", proposal.id, project.id)
    return proposal


def accept_proposal(client, proposal_id):
    """
    Move a proposal to ``payment_pending`` and open its unpaid order.

    Sibling proposals stay untouched; the winner is settled when funds are
    captured.
    """
    with transaction.atomic():
        proposal = (
            Proposal.objects.select_for_update()
            .select_related("project")
            .filter(id=proposal_id)
            .first()
        )
        if proposal is None:
            raise NotFound("Proposal not found")

        project = proposal.project
        if project.client_id != client.id:
            raise PermissionDenied("Unauthorized")
        if not project.is_open:
            raise ValidationError("Project is no longer open.")

        proposal.mark_payment_pending()

        order = Order.objects.create(
            proposal=proposal,
            project=project,
            client=client,
            freelancer=proposal.freelancer,
            title=project.title,
            description=project.description,
            price=proposal.proposed_price,
            delivery_time=proposal.delivery_time,
            status=Order.PENDING_PAYMENT,
        )

        notify_user(
            recipient=proposal.freelancer,
            notif_type=Notification.PROPOSAL_ACCEPTED,
            message=f"Your proposal for '{project.title}' was accepted. Awaiting payment.",
            link=f"/orders/{order.id}",
            data={"proposal_id": proposal.id, "order_id": order.id},
        )
        log_activity(client, "proposal_accepted", f"Accepted proposal on '{project.title}'", proposal.id)

    logger.info("Proposal %s accepted, order %s awaiting payment", proposal.id, order.id)
    return proposal, order


def reject_proposal(client, proposal_id):
    with transaction.atomic():
        proposal = (
            Proposal.objects.select_for_update()
            .select_related("project")
            .filter(id=proposal_id)
            .first()
        )
        if proposal is None:
            raise NotFound("Proposal not found")
        if proposal.project.client_id != client.id:
            raise PermissionDenied("Unauthorized")

        proposal.reject()

        Order.objects.filter(
            proposal=proposal, status=Order.PENDING_PAYMENT
        ).update(status=Order.CANCELLED)

        notify_user(
            recipient=proposal.freelancer,
            notif_type=Notification.PROPOSAL_REJECTED,
            message=f"Your proposal for '{proposal.project.title}' was not selected.",
            link=f"/projects/{proposal.project_id}",
            data={"proposal_id": proposal.id},
        )
        log_activity(client, "proposal_rejected", f"Rejected proposal {proposal.id}", proposal.id)

    return proposal
