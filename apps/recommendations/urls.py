from django.urls import path
from .views import RecommendedFreelancersView, RecommendedProjectsView

urlpatterns = [
    path(
        "recommendations/projects/<int:project_id>/freelancers/",
        RecommendedFreelancersView.as_view(),
        name="recommended-freelancers",
    ),
    path("recommendations/projects/", RecommendedProjectsView.as_view(), name="recommended-projects"),
]
