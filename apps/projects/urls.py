from django.urls import path
from .views import (
    CancelProjectView,
    MyProjectsView,
    OpenProjectRequestsView,
    ProjectProposalsView,
    ProjectRequestDetailView,
    ProjectRequestListCreateView,
)

urlpatterns = [
    path("projects/", ProjectRequestListCreateView.as_view(), name="project-list"),
    path("projects/open/", OpenProjectRequestsView.as_view(), name="project-open"),
    path("projects/mine/", MyProjectsView.as_view(), name="project-mine"),
    path("projects/<int:id>/", ProjectRequestDetailView.as_view(), name="project-detail"),
    path("projects/<int:id>/cancel/", CancelProjectView.as_view(), name="project-cancel"),
    path("projects/<int:id>/proposals/", ProjectProposalsView.as_view(), name="project-proposals"),
]
