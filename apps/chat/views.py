from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Conversation, Message
from .serializers import (
    ConversationSerializer,
    MessageSerializer,
    SendMessageSerializer,
    StartConversationSerializer,
)
from .services.chat_service import get_or_create_conversation, mark_conversation_read, send_message


class ConversationListView(APIView):
    """
    ``GET`` the caller's conversations, newest activity first. ``POST``
    opens (or returns) the conversation for a client/freelancer pair.
    """

    def get(self, request):
        conversations = (
            Conversation.objects.filter(Q(client=request.user) | Q(freelancer=request.user))
            .select_related("client", "freelancer", "project")
            .order_by("-updated_at")
        )
        return Response(
            ConversationSerializer(conversations, many=True, context={"request": request}).data
        )

    def post(self, request):
        serializer = StartConversationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        conversation, created = get_or_create_conversation(
            request.user,
            client_id=serializer.validated_data["client_id"],
            freelancer_id=serializer.validated_data["freelancer_id"],
            project_id=serializer.validated_data.get("project_id"),
        )
        return Response(
            ConversationSerializer(conversation, context={"request": request}).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class ConversationMessagesView(APIView):

    def get_conversation(self, request, conversation_id):
        conversation = get_object_or_404(Conversation, id=conversation_id)
        if not conversation.has_participant(request.user):
            raise PermissionDenied("Unauthorized")
        return conversation

    def get(self, request, conversation_id):
        conversation = self.get_conversation(request, conversation_id)
        messages = (
            Message.objects.filter(conversation=conversation)
            .select_related("sender")
            .order_by("created_at")
        )
        return Response(MessageSerializer(messages, many=True).data)

    def post(self, request, conversation_id):
        conversation = self.get_conversation(request, conversation_id)
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        message = send_message(request.user, conversation, serializer.validated_data["text"])
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class MarkConversationReadView(APIView):

    def post(self, request, conversation_id):
        conversation = get_object_or_404(Conversation, id=conversation_id)
        updated = mark_conversation_read(request.user, conversation)
        return Response({"marked": updated})
