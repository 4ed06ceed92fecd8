from datetime import datetime, time, timedelta

import django_filters
from django.db.models import Q
from django.utils import timezone

from apps.users.models import Profile
from .models import ActivityLog


class ActivityLogFilter(django_filters.FilterSet):
    """
    Every admin search criterion is a declared filter; unset ones are no-ops.
    ``performer_name`` wins over ``user`` when both are given.
    """

    action = django_filters.CharFilter(field_name="action")
    user = django_filters.NumberFilter(field_name="user_id")
    performer_name = django_filters.CharFilter(method="filter_performer_name")
    date = django_filters.DateFilter(method="filter_date")

    class Meta:
        model = ActivityLog
        fields = ["action", "user", "performer_name", "date"]

    def filter_queryset(self, queryset):
        if self.form.cleaned_data.get("performer_name"):
            self.form.cleaned_data["user"] = None
        return super().filter_queryset(queryset)

    def filter_performer_name(self, queryset, name, value):
        search = value.strip()
        if not search:
            return queryset

        parts = search.split()
        name_q = Q()
        for part in parts:
            name_q &= Q(first_name__icontains=part) | Q(last_name__icontains=part)

        user_ids = Profile.objects.filter(name_q).values_list("user_id", flat=True)
        return queryset.filter(user_id__in=list(user_ids))

    def filter_date(self, queryset, name, value):
        start = timezone.make_aware(datetime.combine(value, time.min), timezone.get_current_timezone())
        end = start + timedelta(days=1)
        return queryset.filter(timestamp__gte=start, timestamp__lt=end)
