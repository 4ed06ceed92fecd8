from rest_framework import serializers

from apps.storage.serializers import OwnedFileField
from .models import Order, Review


class OrderSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.display_name", read_only=True)
    freelancer_name = serializers.CharField(source="freelancer.display_name", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "proposal",
            "project",
            "client",
            "client_name",
            "freelancer",
            "freelancer_name",
            "title",
            "description",
            "price",
            "delivery_time",
            "status",
            "delivery_message",
            "deliverables",
            "delivered_at",
            "completed_at",
            "created_at",
        ]
        read_only_fields = fields


class DeliverOrderSerializer(serializers.Serializer):
    message = serializers.CharField()
    deliverables = OwnedFileField(many=True, required=False)


class ReviewSerializer(serializers.ModelSerializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = Review
        fields = ["id", "order", "reviewer", "reviewee", "rating", "comment", "is_public", "created_at"]
        read_only_fields = ["id", "order", "reviewer", "reviewee", "created_at"]
