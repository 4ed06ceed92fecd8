import django_filters
from .models import Profile


class FreelancerFilter(django_filters.FilterSet):
    """
    ``?college=`` exact college, ``?skills=react,python`` any-substring skill match.
    """

    college = django_filters.CharFilter(field_name="college_name")
    skills = django_filters.CharFilter(method="filter_skills")

    class Meta:
        model = Profile
        fields = ["college", "skills"]

    def filter_skills(self, queryset, name, value):
        wanted = [s.strip().lower() for s in value.split(",") if s.strip()]
        if not wanted:
            return queryset

        # skills is a JSON list, so the substring match happens in Python
        matching_ids = [
            profile.id
            for profile in queryset
            if any(
                search in str(skill).lower()
                for skill in profile.skills or []
                for search in wanted
            )
        ]
        return queryset.filter(id__in=matching_ids)
