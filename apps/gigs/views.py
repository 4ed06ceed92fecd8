from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.users.models import Profile
from .filters import GigFilter
from .models import Category, Gig
from .serializers import CategorySerializer, GigSerializer, GigUpdateSerializer

DEFAULT_GIG_LIMIT = 20


def _limit_from(request, default=DEFAULT_GIG_LIMIT):
    try:
        return max(int(request.query_params.get("limit", default)), 1)
    except ValueError:
        return default


class CategoryListView(generics.ListAPIView):
    serializer_class = CategorySerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        return Category.objects.filter(is_active=True)


class GigListCreateView(generics.ListCreateAPIView):
    """
    ``GET`` browses active gigs (``category``, ``search``, ``min_price``,
    ``max_price``, ``limit``); ``POST`` is reserved for verified freelancers.
    """
    serializer_class = GigSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    filterset_class = GigFilter

    def get_queryset(self):
        return (
            Gig.objects.filter(is_active=True)
            .prefetch_related("packages", "images")
            .order_by("-created_at")
        )

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())[:_limit_from(request)]
        return Response(self.get_serializer(queryset, many=True).data)

    def perform_create(self, serializer):
        profile = Profile.objects.filter(user=self.request.user).first()
        if profile is None or not profile.is_freelancer or not profile.is_verified:
            raise PermissionDenied("Only verified freelancers can create gigs")
        serializer.save(freelancer=self.request.user)


class GigDetailView(APIView):
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]

    def get(self, request, gig_id):
        gig = Gig.objects.filter(id=gig_id).prefetch_related("packages", "images").first()
        if gig is None:
            return Response(None)
        return Response(GigSerializer(gig, context={"request": request}).data)

    def patch(self, request, gig_id):
        gig = get_object_or_404(Gig, id=gig_id)
        if gig.freelancer_id != request.user.id:
            raise PermissionDenied("Gig not found or unauthorized")

        serializer = GigUpdateSerializer(gig, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(GigSerializer(gig, context={"request": request}).data, status=status.HTTP_200_OK)


class MyGigsView(generics.ListAPIView):
    serializer_class = GigSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        user = self.request.user
        if not user.is_authenticated:
            return Gig.objects.none()
        return Gig.objects.filter(freelancer=user).prefetch_related("packages", "images")
