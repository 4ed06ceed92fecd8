from django.contrib import admin

from .models import Proposal


@admin.register(Proposal)
class ProposalAdmin(admin.ModelAdmin):
    list_display = ("id", "project", "freelancer", "proposed_price", "status", "created_at")
    list_filter = ("status",)
