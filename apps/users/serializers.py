import re
from django.contrib.auth import get_user_model, authenticate
from django.db import transaction
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from apps.storage.serializers import OwnedFileField
from .models import Profile

User = get_user_model()


# -------- Registration --------
class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    username = serializers.CharField(max_length=150)
    role = serializers.ChoiceField(choices=[(User.CLIENT, "Client"), (User.FREELANCER, "Freelancer")])
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Password must contain uppercase, lowercase and a number.",
    )
    confirm_password = serializers.CharField(write_only=True, min_length=8)

    def validate_email(self, value):
        value = value.lower().strip()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email already registered.")
        return value

    def validate_password(self, value):
        if not re.search(r"[A-Z]", value):
            raise serializers.ValidationError("Password must contain at least one uppercase letter.")
        if not re.search(r"[a-z]", value):
            raise serializers.ValidationError("Password must contain at least one lowercase letter.")
        if not re.search(r"\d", value):
            raise serializers.ValidationError("Password must contain at least one digit.")
        return value

    def validate(self, data):
        if data["password"] != data["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match."})
        return data

    def create(self, validated_data):
        validated_data.pop("confirm_password")
        return User.objects.create_user(**validated_data)


# -------- Login --------
class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def validate(self, data):
        email = data.get("email").lower().strip()
        password = data.get("password")

        user = authenticate(email=email, password=password)
        if not user:
            raise serializers.ValidationError("Invalid email or password.")

        if not user.is_active:
            raise serializers.ValidationError("User account is disabled.")

        refresh = RefreshToken.for_user(user)
        return {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
            "user": {
                "id": user.id,
                "email": user.email,
                "username": user.username,
                "role": user.role,
            },
        }


class MeSerializer(serializers.ModelSerializer):
    is_admin = serializers.BooleanField(source="is_platform_admin", read_only=True)
    has_profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "username", "role", "is_admin", "has_profile"]
        read_only_fields = fields

    def get_has_profile(self, obj):
        return Profile.objects.filter(user=obj).exists()


def normalize_skills(skills):
    """Trim, drop blanks and de-duplicate (case-insensitively) keeping order."""
    seen = set()
    cleaned = []
    for skill in skills or []:
        value = str(skill).strip()
        key = value.lower()
        if value and key not in seen:
            seen.add(key)
            cleaned.append(value)
    return cleaned


class PortfolioItemSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    image = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    url = serializers.URLField(required=False, allow_blank=True)


# -------- Profile --------
class ProfileSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source="user.email", read_only=True)
    user_id = serializers.IntegerField(source="user.id", read_only=True)
    full_name = serializers.CharField(read_only=True)
    skills = serializers.ListField(
        child=serializers.CharField(max_length=60), required=False
    )
    portfolio = PortfolioItemSerializer(many=True, required=False)
    profile_picture = OwnedFileField(required=False, allow_null=True)
    has_payout_account = serializers.SerializerMethodField()

    class Meta:
        model = Profile
        fields = [
            "id",
            "user_id",
            "email",
            "user_type",
            "first_name",
            "last_name",
            "full_name",
            "bio",
            "profile_picture",
            "college_name",
            "college_email",
            "graduation_year",
            "is_verified",
            "skills",
            "portfolio",
            "company",
            "average_rating",
            "total_reviews",
            "has_payout_account",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "user_id",
            "email",
            "is_verified",
            "average_rating",
            "total_reviews",
            "created_at",
            "updated_at",
        ]

    def get_has_payout_account(self, obj):
        return bool(obj.razorpay_account_id)

    def validate_skills(self, value):
        return normalize_skills(value)

    def validate_user_type(self, value):
        if self.instance is not None and value != self.instance.user_type:
            raise serializers.ValidationError("User type cannot be changed.")
        if value == User.ADMIN:
            raise serializers.ValidationError("Admin profiles cannot be self-assigned.")
        return value

    def validate(self, attrs):
        if self.instance is None and "user_type" not in attrs:
            raise serializers.ValidationError({"user_type": "This field is required."})
        return attrs

    def create(self, validated_data):
        from apps.verification.models import VerificationRequest

        user = self.context["request"].user

        if Profile.objects.filter(user=user).exists():
            raise serializers.ValidationError("Profile already exists")

        with transaction.atomic():
            profile = Profile.objects.create(
                user=user,
                is_verified=False,
                total_reviews=0,
                **validated_data,
            )

            if user.role not in (profile.user_type, User.ADMIN):
                user.role = profile.user_type
                user.save(update_fields=["role"])

            # Freelancers who register with college details enter the review queue
            if profile.is_freelancer and profile.college_email and profile.college_name:
                VerificationRequest.objects.create(
                    user=user,
                    college_email=profile.college_email,
                    college_name=profile.college_name,
                    status=VerificationRequest.PENDING,
                )

        return profile

    def update(self, instance, validated_data):
        for field in ("user_type", "college_email", "college_name", "is_verified"):
            validated_data.pop(field, None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class PublicProfileSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(source="user.id", read_only=True)
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Profile
        fields = [
            "id",
            "user_id",
            "user_type",
            "full_name",
            "first_name",
            "last_name",
            "bio",
            "profile_picture",
            "college_name",
            "graduation_year",
            "is_verified",
            "skills",
            "portfolio",
            "company",
            "average_rating",
            "total_reviews",
        ]
        read_only_fields = fields
