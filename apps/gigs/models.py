from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default="")
    icon = models.CharField(max_length=16, blank=True, default="")
    subcategories = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name_plural = "categories"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Gig(models.Model):
    """
    Fixed-scope service listing authored by a freelancer.
    """

    freelancer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="gigs")
    title = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=100)
    subcategory = models.CharField(max_length=100, blank=True, default="")
    tags = models.JSONField(default=list, blank=True)

    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_time = models.PositiveIntegerField(help_text="Delivery time in days")
    images = models.ManyToManyField("storage.StoredFile", blank=True, related_name="+")

    is_active = models.BooleanField(default=True)
    total_orders = models.PositiveIntegerField(default=0)
    average_rating = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category"]),
            models.Index(fields=["is_active"]),
        ]

    def clean(self):
        if self.base_price is not None and self.base_price <= 0:
            raise ValidationError("Base price must be positive.")
        if self.delivery_time is not None and self.delivery_time < 1:
            raise ValidationError("Delivery time must be at least one day.")

    def __str__(self):
        return f"Gig: {self.title}"


class GigPackage(models.Model):
    gig = models.ForeignKey(Gig, on_delete=models.CASCADE, related_name="packages")
    name = models.CharField(max_length=100)
    description = models.TextField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_time = models.PositiveIntegerField()
    features = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["price"]

    def __str__(self):
        return f"{self.gig.title} / {self.name}"
