import logging

from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.services.activity_logger import log_activity
from apps.proposals.models import Proposal
from apps.proposals.serializers import ProposalSerializer
from apps.users.permissions import IsClient
from .filters import ProjectRequestFilter
from .models import ProjectRequest
from .serializers import ProjectRequestDetailSerializer, ProjectRequestSerializer

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_LIMIT = 20


class ProjectRequestListCreateView(generics.ListCreateAPIView):
    """
    ``GET`` lists project requests filtered by ``category``, ``search``,
    ``status`` and capped by ``limit``. ``POST`` creates one for the calling
    client.
    """
    serializer_class = ProjectRequestSerializer
    filterset_class = ProjectRequestFilter

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsClient()]
        return [permissions.AllowAny()]

    def get_queryset(self):
        return ProjectRequest.objects.select_related("client").order_by("-created_at")

    def list(self, request, *args, **kwargs):
        try:
            limit = max(int(request.query_params.get("limit", DEFAULT_PROJECT_LIMIT)), 1)
        except ValueError:
            limit = DEFAULT_PROJECT_LIMIT
        queryset = self.filter_queryset(self.get_queryset())[:limit]
        return Response(self.get_serializer(queryset, many=True).data)

    def perform_create(self, serializer):
        project = serializer.save(client=self.request.user)
        log_activity(self.request.user, "project_created", f"Posted '{project.title}'", project.id)
        logger.info("Project request %s created by user %s", project.id, self.request.user.id)


class OpenProjectRequestsView(generics.ListAPIView):
    serializer_class = ProjectRequestSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        return (
            ProjectRequest.objects.filter(status=ProjectRequest.OPEN)
            .select_related("client")
            .order_by("-created_at")
        )


class ProjectRequestDetailView(generics.RetrieveAPIView):
    queryset = ProjectRequest.objects.select_related("client")
    serializer_class = ProjectRequestDetailSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "id"


class MyProjectsView(generics.ListAPIView):
    serializer_class = ProjectRequestSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        user = self.request.user
        if not user.is_authenticated:
            return ProjectRequest.objects.none()
        return ProjectRequest.objects.filter(client=user).order_by("-created_at")


class CancelProjectView(APIView):

    def post(self, request, id):
        project = get_object_or_404(ProjectRequest, id=id)

        if project.client_id != request.user.id:
            raise PermissionDenied("Only the project owner can cancel it.")
        if not project.is_open:
            raise ValidationError("Only open projects can be cancelled.")

        project.status = ProjectRequest.CANCELLED
        project.save(update_fields=["status", "updated_at"])
        log_activity(request.user, "project_cancelled", f"Cancelled '{project.title}'", project.id)

        return Response(ProjectRequestSerializer(project).data, status=status.HTTP_200_OK)


class ProjectProposalsView(generics.ListAPIView):
    """
    Proposals received on a project, visible to the owning client only.
    """
    serializer_class = ProposalSerializer

    def get_queryset(self):
        project = get_object_or_404(ProjectRequest, id=self.kwargs["id"])
        if project.client_id != self.request.user.id:
            raise PermissionDenied("Unauthorized")
        return (
            Proposal.objects.filter(project=project)
            .select_related("freelancer", "freelancer__profile")
            .order_by("-created_at")
        )
