from rest_framework import serializers

from .models import Proposal


class ProposalCreateSerializer(serializers.Serializer):
    project = serializers.IntegerField()
    cover_letter = serializers.CharField()
    proposed_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    delivery_time = serializers.IntegerField(min_value=1)

    def validate_proposed_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Proposed price must be positive.")
        return value

    def validate_cover_letter(self, value):
        if not value.strip():
            raise serializers.ValidationError("Cover letter cannot be empty.")
        return value


class ProposalSerializer(serializers.ModelSerializer):
    freelancer_name = serializers.SerializerMethodField()

    class Meta:
        model = Proposal
        fields = [
            "id",
            "project",
            "freelancer",
            "freelancer_name",
            "cover_letter",
            "proposed_price",
            "delivery_time",
            "status",
            "created_at",
        ]
        read_only_fields = fields

    def get_freelancer_name(self, obj):
        return obj.freelancer.display_name


class ProposalDetailSerializer(ProposalSerializer):
    project_title = serializers.CharField(source="project.title", read_only=True)
    client_id = serializers.IntegerField(source="project.client_id", read_only=True)
    order_id = serializers.SerializerMethodField()

    class Meta(ProposalSerializer.Meta):
        fields = ProposalSerializer.Meta.fields + ["project_title", "client_id", "order_id"]
        read_only_fields = fields

    def get_order_id(self, obj):
        order = getattr(obj, "order", None)
        return order.id if order is not None else None
