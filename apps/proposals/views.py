from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.orders.serializers import OrderSerializer
from apps.users.permissions import IsClient, IsFreelancer
from .models import Proposal
from .serializers import ProposalCreateSerializer, ProposalDetailSerializer, ProposalSerializer
from .services.proposal_workflow import accept_proposal, reject_proposal, submit_proposal


class ProposalCreateView(APIView):
    """
    Allow a freelancer to bid on an open project.
    """
    permission_classes = [IsFreelancer]

    def post(self, request):
        serializer = ProposalCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        proposal = submit_proposal(
            freelancer=request.user,
            project_id=serializer.validated_data["project"],
            cover_letter=serializer.validated_data["cover_letter"],
            proposed_price=serializer.validated_data["proposed_price"],
            delivery_time=serializer.validated_data["delivery_time"],
        )
        return Response(ProposalSerializer(proposal).data, status=status.HTTP_201_CREATED)


class MyProposalsView(generics.ListAPIView):
    serializer_class = ProposalDetailSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        user = self.request.user
        if not user.is_authenticated:
            return Proposal.objects.none()
        return (
            Proposal.objects.filter(freelancer=user)
            .select_related("project", "freelancer")
            .order_by("-created_at")
        )


class ProposalDetailView(APIView):

    def get(self, request, proposal_id):
        proposal = get_object_or_404(
            Proposal.objects.select_related("project", "freelancer"), id=proposal_id
        )
        if request.user.id not in (proposal.freelancer_id, proposal.project.client_id):
            raise PermissionDenied("Unauthorized")
        return Response(ProposalDetailSerializer(proposal).data)


class AcceptProposalView(APIView):
    permission_classes = [IsClient]

    def post(self, request, proposal_id):
        proposal, order = accept_proposal(request.user, proposal_id)
        return Response(
            {
                "proposal": ProposalSerializer(proposal).data,
                "order": OrderSerializer(order).data,
            },
            status=status.HTTP_200_OK,
        )


class RejectProposalView(APIView):
    permission_classes = [IsClient]

    def post(self, request, proposal_id):
        proposal = reject_proposal(request.user, proposal_id)
        return Response(ProposalSerializer(proposal).data, status=status.HTTP_200_OK)
