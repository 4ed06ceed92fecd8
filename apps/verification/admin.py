from django.contrib import admin

from .models import VerificationRequest


@admin.register(VerificationRequest)
class VerificationRequestAdmin(admin.ModelAdmin):
    list_display = ("user", "college_name", "status", "created_at", "reviewed_at")
    list_filter = ("status",)
