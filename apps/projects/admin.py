from django.contrib import admin

from .models import ProjectRequest


@admin.register(ProjectRequest)
class ProjectRequestAdmin(admin.ModelAdmin):
    list_display = ("title", "client", "status", "proposal_count", "created_at")
    list_filter = ("status", "category")
    search_fields = ("title", "client__email")
