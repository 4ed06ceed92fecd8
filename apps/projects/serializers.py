from rest_framework import serializers

from apps.storage.serializers import OwnedFileField
from apps.users.models import Profile
from apps.users.serializers import PublicProfileSerializer, normalize_skills
from .models import ProjectRequest


class ProjectRequestSerializer(serializers.ModelSerializer):
    skills = serializers.ListField(child=serializers.CharField(max_length=60), required=False)
    attachments = OwnedFileField(many=True, required=False)
    client_name = serializers.SerializerMethodField()

    class Meta:
        model = ProjectRequest
        fields = [
            "id",
            "client",
            "client_name",
            "title",
            "description",
            "category",
            "budget_min",
            "budget_max",
            "deadline",
            "skills",
            "attachments",
            "status",
            "selected_freelancer",
            "proposal_count",
            "created_at",
        ]
        read_only_fields = [
            "id",
            "client",
            "client_name",
            "status",
            "selected_freelancer",
            "proposal_count",
            "created_at",
        ]

    def get_client_name(self, obj):
        profile = Profile.objects.filter(user_id=obj.client_id).first()
        if profile is not None:
            return profile.full_name
        return obj.client.username

    def validate_skills(self, value):
        return normalize_skills(value)

    def validate(self, attrs):
        budget_min = attrs.get("budget_min", getattr(self.instance, "budget_min", None))
        budget_max = attrs.get("budget_max", getattr(self.instance, "budget_max", None))
        if budget_min is not None and budget_min <= 0:
            raise serializers.ValidationError({"budget_min": "Minimum budget must be positive."})
        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            raise serializers.ValidationError({"budget_max": "Maximum budget must be at least the minimum."})
        return attrs

    def create(self, validated_data):
        attachments = validated_data.pop("attachments", [])
        project = ProjectRequest.objects.create(
            status=ProjectRequest.OPEN,
            proposal_count=0,
            **validated_data,
        )
        project.attachments.set(attachments)
        return project


class ProjectRequestDetailSerializer(ProjectRequestSerializer):
    client_profile = serializers.SerializerMethodField()

    class Meta(ProjectRequestSerializer.Meta):
        fields = ProjectRequestSerializer.Meta.fields + ["client_profile"]

    def get_client_profile(self, obj):
        profile = Profile.objects.filter(user_id=obj.client_id).first()
        if profile is None:
            return None
        return PublicProfileSerializer(profile).data
