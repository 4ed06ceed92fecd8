from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .filters import FreelancerFilter
from .models import Profile
from .serializers import (
    LoginSerializer,
    MeSerializer,
    ProfileSerializer,
    PublicProfileSerializer,
    RegisterSerializer,
)

User = get_user_model()

DEFAULT_FREELANCER_LIMIT = 20


class RegisterView(generics.GenericAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(
            {
                "success": True,
                "message": "User registered successfully.",
                "user": {
                    "id": user.id,
                    "email": user.email,
                    "username": user.username,
                    "role": user.role,
                },
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(generics.GenericAPIView):
    """
    Login using email and password.
    Returns access and refresh JWT tokens.
    """
    serializer_class = LoginSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(
            {
                "success": True,
                "message": "Login successful.",
                "data": serializer.validated_data,
            },
            status=status.HTTP_200_OK,
        )


class MeView(generics.RetrieveAPIView):
    serializer_class = MeSerializer

    def get_object(self):
        return self.request.user


class ProfileView(APIView):
    """
    ``GET`` current profile (null when not set up yet), ``POST`` first-time
    setup, ``PATCH`` partial edit.
    """

    def get(self, request):
        profile = Profile.objects.filter(user=request.user).first()
        if profile is None:
            return Response(None)
        return Response(ProfileSerializer(profile, context={"request": request}).data)

    def post(self, request):
        serializer = ProfileSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        profile = serializer.save()
        return Response(ProfileSerializer(profile, context={"request": request}).data, status=status.HTTP_201_CREATED)

    def patch(self, request):
        profile = get_object_or_404(Profile, user=request.user)
        serializer = ProfileSerializer(
            profile, data=request.data, partial=True, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class PublicProfileView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, user_id):
        profile = Profile.objects.select_related("user").filter(user_id=user_id).first()
        if profile is None:
            return Response(None)
        return Response(PublicProfileSerializer(profile).data)


class BrowseFreelancers(generics.ListAPIView):
    serializer_class = PublicProfileSerializer
    permission_classes = [permissions.AllowAny]
    filterset_class = FreelancerFilter

    def get_queryset(self):
        return (
            Profile.objects
            .select_related("user")
            .filter(user_type=User.FREELANCER, is_verified=True)
            .order_by("-average_rating", "-created_at")
        )

    def list(self, request, *args, **kwargs):
        try:
            limit = int(request.query_params.get("limit", DEFAULT_FREELANCER_LIMIT))
        except ValueError:
            limit = DEFAULT_FREELANCER_LIMIT

        queryset = self.filter_queryset(self.get_queryset())[:max(limit, 1)]
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)
