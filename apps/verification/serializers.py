from rest_framework import serializers

from apps.storage.serializers import OwnedFileField
from apps.users.serializers import MeSerializer, PublicProfileSerializer
from .models import VerificationRequest


class SubmitVerificationSerializer(serializers.Serializer):
    college_email = serializers.EmailField()
    college_name = serializers.CharField(max_length=255)
    course = serializers.CharField(max_length=255, required=False, allow_blank=True)
    department = serializers.CharField(max_length=255, required=False, allow_blank=True)
    student_id = OwnedFileField()
    govt_id = OwnedFileField(required=False, allow_null=True)


class VerificationRequestSerializer(serializers.ModelSerializer):

    class Meta:
        model = VerificationRequest
        fields = [
            "id",
            "user",
            "college_email",
            "college_name",
            "course",
            "department",
            "student_id",
            "govt_id",
            "status",
            "admin_notes",
            "reviewed_by",
            "reviewed_at",
            "created_at",
        ]
        read_only_fields = fields


class PendingVerificationSerializer(VerificationRequestSerializer):
    profile = serializers.SerializerMethodField()
    user_info = MeSerializer(source="user", read_only=True)

    class Meta(VerificationRequestSerializer.Meta):
        fields = VerificationRequestSerializer.Meta.fields + ["profile", "user_info"]
        read_only_fields = fields

    def get_profile(self, obj):
        profile = getattr(obj.user, "profile", None)
        if profile is None:
            return None
        return PublicProfileSerializer(profile).data


class VerificationDetailSerializer(PendingVerificationSerializer):
    student_id_url = serializers.SerializerMethodField()
    govt_id_url = serializers.SerializerMethodField()

    class Meta(PendingVerificationSerializer.Meta):
        fields = PendingVerificationSerializer.Meta.fields + ["student_id_url", "govt_id_url"]
        read_only_fields = fields

    def get_student_id_url(self, obj):
        return obj.student_id.url if obj.student_id else None

    def get_govt_id_url(self, obj):
        return obj.govt_id.url if obj.govt_id else None


class ReviewVerificationSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[VerificationRequest.APPROVED, VerificationRequest.REJECTED]
    )
    admin_notes = serializers.CharField(required=False, allow_blank=True, default="")
