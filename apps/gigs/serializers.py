from django.db import transaction
from rest_framework import serializers

from apps.storage.serializers import OwnedFileField
from apps.users.models import Profile
from apps.users.serializers import PublicProfileSerializer, normalize_skills
from .models import Category, Gig, GigPackage


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "description", "icon", "subcategories", "is_active"]


class GigPackageSerializer(serializers.ModelSerializer):
    features = serializers.ListField(child=serializers.CharField(max_length=200), required=False)

    class Meta:
        model = GigPackage
        fields = ["id", "name", "description", "price", "delivery_time", "features"]
        read_only_fields = ["id"]

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Package price must be positive.")
        return value


class GigSerializer(serializers.ModelSerializer):
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    images = OwnedFileField(many=True, required=False)
    packages = GigPackageSerializer(many=True, required=False)
    freelancer = serializers.SerializerMethodField()

    class Meta:
        model = Gig
        fields = [
            "id",
            "freelancer",
            "title",
            "description",
            "category",
            "subcategory",
            "tags",
            "base_price",
            "delivery_time",
            "images",
            "packages",
            "is_active",
            "total_orders",
            "average_rating",
            "created_at",
        ]
        read_only_fields = ["id", "freelancer", "is_active", "total_orders", "average_rating", "created_at"]

    def get_freelancer(self, obj):
        profile = Profile.objects.filter(user_id=obj.freelancer_id).first()
        if profile is None:
            return None
        return PublicProfileSerializer(profile).data

    def validate_tags(self, value):
        return normalize_skills(value)

    def validate_base_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Base price must be positive.")
        return value

    def validate_delivery_time(self, value):
        if value < 1:
            raise serializers.ValidationError("Delivery time must be at least one day.")
        return value

    def create(self, validated_data):
        packages = validated_data.pop("packages", [])
        images = validated_data.pop("images", [])

        with transaction.atomic():
            gig = Gig.objects.create(**validated_data)
            gig.images.set(images)
            for package in packages:
                GigPackage.objects.create(gig=gig, **package)
        return gig


class GigUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Gig
        fields = ["title", "description", "base_price", "delivery_time", "is_active"]

    def validate_base_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Base price must be positive.")
        return value

    def validate_delivery_time(self, value):
        if value < 1:
            raise serializers.ValidationError("Delivery time must be at least one day.")
        return value
