import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from apps.chat.services.chat_service import conversation_group_name

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncWebsocketConsumer):

    async def connect(self):
        self.conversation_id = self.scope["url_route"]["kwargs"]["conversation_id"]
        self.group_name = conversation_group_name(self.conversation_id)

        if not await self.is_participant():
            logger.info("Rejected chat socket for conversation %s", self.conversation_id)
            await self.close()
            return

        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            logger.debug("Ignoring malformed chat frame")
            return

        text = str(data.get("text", "")).strip()
        if not text:
            return

        payload = await self.create_message(text)
        await self.channel_layer.group_send(
            self.group_name,
            {"type": "chat_message", "message": payload},
        )

    async def chat_message(self, event):
        await self.send(text_data=json.dumps(event["message"]))

    @database_sync_to_async
    def is_participant(self):
        from apps.chat.models import Conversation

        user = self.scope.get("user")
        if not user or not user.is_authenticated:
            return False

        conversation = Conversation.objects.filter(id=self.conversation_id).first()
        return conversation is not None and conversation.has_participant(user)

    @database_sync_to_async
    def create_message(self, text):
        from apps.chat.models import Conversation, Message
        from apps.chat.serializers import MessageSerializer

        conversation = Conversation.objects.get(id=self.conversation_id)
        message = Message.objects.create(
            conversation=conversation,
            sender=self.scope["user"],
            text=text,
        )
        Conversation.objects.filter(id=conversation.id).update(
            last_message=text,
            updated_at=message.created_at,
        )
        return MessageSerializer(message).data
