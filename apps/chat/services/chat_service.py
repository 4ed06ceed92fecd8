import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, PermissionDenied

from apps.chat.models import Conversation, Message
from apps.projects.models import ProjectRequest

logger = logging.getLogger(__name__)

User = get_user_model()


def conversation_group_name(conversation_id):
    return f"chat_{conversation_id}"


def get_or_create_conversation(user, client_id, freelancer_id, project_id=None):
    if user.id not in (client_id, freelancer_id):
        raise PermissionDenied("You can only open conversations you take part in.")

    client = User.objects.filter(id=client_id).first()
    freelancer = User.objects.filter(id=freelancer_id).first()
    if client is None or freelancer is None:
        raise NotFound("Participant not found")

    project = None
    if project_id is not None:
        project = ProjectRequest.objects.filter(id=project_id).first()
        if project is None:
            raise NotFound("Project not found")

    lookup = {"project": project, "client": client, "freelancer": freelancer}
    conversation = Conversation.objects.filter(**lookup).first()
    if conversation is not None:
        return conversation, False

    try:
        with transaction.atomic():
            return Conversation.objects.create(**lookup), True
    except IntegrityError:
        # Lost a race against a concurrent open
        return Conversation.objects.get(**lookup), False


def send_message(user, conversation, text):
    if not conversation.has_participant(user):
        raise PermissionDenied("Unauthorized")

    with transaction.atomic():
        message = Message.objects.create(conversation=conversation, sender=user, text=text)
        Conversation.objects.filter(id=conversation.id).update(
            last_message=text,
            updated_at=message.created_at,
        )
        transaction.on_commit(lambda: broadcast_message(message))

    return message


def broadcast_message(message):
    from apps.chat.serializers import MessageSerializer

    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(
            conversation_group_name(message.conversation_id),
            {"type": "chat_message", "message": MessageSerializer(message).data},
        )
    except Exception:
        logger.exception("Failed to broadcast message %s", message.id)


def mark_conversation_read(user, conversation):
    if not conversation.has_participant(user):
        raise PermissionDenied("Unauthorized")

    return (
        Message.objects.filter(conversation=conversation, seen=False)
        .exclude(sender=user)
        .update(seen=True)
    )

