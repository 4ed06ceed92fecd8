from rest_framework import generics, status
from rest_framework.response import Response

from apps.users.permissions import IsPlatformAdmin
from .filters import ActivityLogFilter
from .models import ActivityLog
from .serializers import ActivityLogCreateSerializer, ActivityLogSerializer
from .services.activity_logger import log_activity

MAX_LOGS = 50


class LogActivityView(generics.CreateAPIView):
    serializer_class = ActivityLogCreateSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        log = log_activity(request.user, **serializer.validated_data)
        return Response({"id": log.id}, status=status.HTTP_201_CREATED)


class AdminActivityLogListView(generics.ListAPIView):
    serializer_class = ActivityLogSerializer
    permission_classes = [IsPlatformAdmin]
    filterset_class = ActivityLogFilter

    def get_queryset(self):
        return ActivityLog.objects.select_related("user", "user__profile").order_by("-timestamp")

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())[:MAX_LOGS]
        return Response(self.get_serializer(queryset, many=True).data)
