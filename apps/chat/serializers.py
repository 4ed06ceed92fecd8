from rest_framework import serializers

from apps.users.models import Profile
from .models import Conversation, Message


class MessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.CharField(source="sender.display_name", read_only=True)

    class Meta:
        model = Message
        fields = ["id", "conversation", "sender", "sender_name", "text", "seen", "created_at"]
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=5000)

    def validate_text(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Message cannot be empty.")
        return value


class StartConversationSerializer(serializers.Serializer):
    project_id = serializers.IntegerField(required=False, allow_null=True)
    client_id = serializers.IntegerField()
    freelancer_id = serializers.IntegerField()


class ConversationSerializer(serializers.ModelSerializer):
    other_participant = serializers.SerializerMethodField()
    unread_count = serializers.SerializerMethodField()
    project_title = serializers.CharField(source="project.title", read_only=True, default=None)

    class Meta:
        model = Conversation
        fields = [
            "id",
            "project",
            "project_title",
            "client",
            "freelancer",
            "last_message",
            "updated_at",
            "other_participant",
            "unread_count",
        ]
        read_only_fields = fields

    def _viewer(self):
        request = self.context.get("request")
        return request.user if request else None

    def get_other_participant(self, obj):
        viewer = self._viewer()
        if viewer is None:
            return None

        other = obj.other_participant(viewer)
        profile = Profile.objects.filter(user=other).select_related("profile_picture").first()
        picture = profile.profile_picture.url if profile and profile.profile_picture else None
        return {
            "id": other.id,
            "name": other.display_name,
            "profile_picture": picture,
        }

    def get_unread_count(self, obj):
        viewer = self._viewer()
        if viewer is None:
            return 0
        return obj.messages.filter(seen=False).exclude(sender=viewer).count()
