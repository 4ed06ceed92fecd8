from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.projects.models import ProjectRequest
from apps.projects.serializers import ProjectRequestSerializer
from apps.users.serializers import PublicProfileSerializer
from .services.scoring import RecommendationService


class RecommendedFreelancersView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, project_id):
        project = ProjectRequest.objects.filter(id=project_id).first()
        if project is None:
            return Response([])

        results = []
        for score, profile, details in RecommendationService.freelancers_for_project(project):
            data = PublicProfileSerializer(profile).data
            data["score"] = round(score, 2)
            data["match_details"] = details
            results.append(data)
        return Response(results)


class RecommendedProjectsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        results = []
        for score, project in RecommendationService.projects_for_freelancer(request.user):
            data = ProjectRequestSerializer(project).data
            data["score"] = round(score, 2)
            results.append(data)
        return Response(results)
