from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Custom user manager supporting email authentication."""

    def create_user(self, email, username, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        if not username:
            raise ValueError("Username is required")

        email = self.normalize_email(email)

        user = self.model(
            email=email,
            username=username,
            **extra_fields
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, username, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, username, password, **extra_fields)


class User(AbstractUser):
    CLIENT = "client"
    FREELANCER = "freelancer"
    ADMIN = "admin"

    ROLE_CHOICES = (
        (CLIENT, "Client"),
        (FREELANCER, "Freelancer"),
        (ADMIN, "Admin"),
    )

    email = models.EmailField(unique=True, db_index=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=CLIENT)
    created_at = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        db_table = "users"
        indexes = [
            models.Index(fields=["role", "is_active"]),
        ]

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def is_platform_admin(self):
        return self.role == self.ADMIN

    @property
    def display_name(self):
        profile = getattr(self, "profile", None)
        if profile is not None:
            return profile.full_name
        return self.get_full_name() or self.username


class Profile(models.Model):
    USER_TYPE_CHOICES = (
        (User.FREELANCER, "Freelancer"),
        (User.CLIENT, "Client"),
        (User.ADMIN, "Admin"),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    user_type = models.CharField(max_length=20, choices=USER_TYPE_CHOICES)

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    bio = models.TextField(blank=True, default="")
    profile_picture = models.ForeignKey(
        "storage.StoredFile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    # Freelancer specific
    college_name = models.CharField(max_length=255, blank=True, default="")
    college_email = models.EmailField(blank=True, default="")
    graduation_year = models.PositiveIntegerField(null=True, blank=True)
    student_id = models.ForeignKey(
        "storage.StoredFile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    is_verified = models.BooleanField(default=False)
    skills = models.JSONField(default=list, blank=True)
    portfolio = models.JSONField(default=list, blank=True)
    razorpay_account_id = models.CharField(max_length=64, blank=True, default="")

    # Client specific
    company = models.CharField(max_length=255, blank=True, default="")

    # Ratings aggregate, recomputed from reviews
    average_rating = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)
    total_reviews = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "profiles"
        indexes = [
            models.Index(fields=["user_type"]),
            models.Index(fields=["is_verified"]),
            models.Index(fields=["college_name"]),
        ]

    def __str__(self):
        return f"Profile: {self.full_name} ({self.user_type})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_freelancer(self):
        return self.user_type == User.FREELANCER
