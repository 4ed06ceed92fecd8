import django_filters
from django.db.models import Q

from .models import ProjectRequest


class ProjectRequestFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category")
    status = django_filters.ChoiceFilter(choices=ProjectRequest.STATUS_CHOICES)
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = ProjectRequest
        fields = ["category", "status", "search"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))
