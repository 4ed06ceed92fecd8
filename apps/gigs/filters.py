import django_filters
from .models import Gig


class GigFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category")
    search = django_filters.CharFilter(field_name="title", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")

    class Meta:
        model = Gig
        fields = ["category", "search", "min_price", "max_price"]
