from django.contrib import admin
from .models import Category, Gig, GigPackage


class GigPackageInline(admin.TabularInline):
    model = GigPackage
    extra = 0


@admin.register(Gig)
class GigAdmin(admin.ModelAdmin):
    list_display = ("title", "freelancer", "category", "base_price", "is_active")
    list_filter = ("category", "is_active")
    search_fields = ("title",)
    inlines = [GigPackageInline]


admin.site.register(Category)
