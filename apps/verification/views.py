from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.users.permissions import IsPlatformAdmin
from .models import VerificationRequest
from .serializers import (
    PendingVerificationSerializer,
    ReviewVerificationSerializer,
    SubmitVerificationSerializer,
    VerificationDetailSerializer,
    VerificationRequestSerializer,
)
from .services.review import review_verification, submit_verification


class SubmitVerificationView(APIView):

    def post(self, request):
        serializer = SubmitVerificationSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        verification = submit_verification(request.user, **serializer.validated_data)
        return Response(
            VerificationRequestSerializer(verification).data,
            status=status.HTTP_201_CREATED,
        )


class MyVerificationStatusView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        if not request.user.is_authenticated:
            return Response(None)

        latest = VerificationRequest.objects.filter(user=request.user).order_by("-created_at", "-id").first()
        if latest is None:
            return Response(None)
        return Response(VerificationRequestSerializer(latest).data)


class PendingVerificationsView(generics.ListAPIView):
    serializer_class = PendingVerificationSerializer
    permission_classes = [IsPlatformAdmin]

    def get_queryset(self):
        return (
            VerificationRequest.objects.filter(status=VerificationRequest.PENDING)
            .select_related("user", "user__profile")
            .order_by("created_at")
        )


class VerificationDetailView(generics.RetrieveAPIView):
    queryset = VerificationRequest.objects.select_related("user", "student_id", "govt_id")
    serializer_class = VerificationDetailSerializer
    permission_classes = [IsPlatformAdmin]
    lookup_field = "id"


class ReviewVerificationView(APIView):
    permission_classes = [IsPlatformAdmin]

    def post(self, request, id):
        get_object_or_404(VerificationRequest, id=id)
        serializer = ReviewVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        verification = review_verification(
            request.user,
            id,
            serializer.validated_data["status"],
            serializer.validated_data.get("admin_notes", ""),
        )
        return Response(VerificationRequestSerializer(verification).data)
