from rest_framework import serializers
from .models import ActivityLog


class ActivityLogCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActivityLog
        fields = ["action", "details", "related_id"]


class ActivityLogSerializer(serializers.ModelSerializer):
    performer_name = serializers.SerializerMethodField()
    performer_email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = ActivityLog
        fields = [
            "id",
            "user",
            "action",
            "details",
            "related_id",
            "timestamp",
            "performer_name",
            "performer_email",
        ]
        read_only_fields = fields

    def get_performer_name(self, obj):
        profile = getattr(obj.user, "profile", None)
        if profile is not None:
            return profile.full_name
        return obj.user.get_full_name() or obj.user.username or "Unknown User"
