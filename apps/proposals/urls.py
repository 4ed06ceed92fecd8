from django.urls import path
from .views import (
    AcceptProposalView,
    MyProposalsView,
    ProposalCreateView,
    ProposalDetailView,
    RejectProposalView,
)

urlpatterns = [
    path("proposals/", ProposalCreateView.as_view(), name="proposal-create"),
    path("proposals/mine/", MyProposalsView.as_view(), name="proposal-mine"),
    path("proposals/<int:proposal_id>/", ProposalDetailView.as_view(), name="proposal-detail"),
    path("proposals/<int:proposal_id>/accept/", AcceptProposalView.as_view(), name="proposal-accept"),
    path("proposals/<int:proposal_id>/reject/", RejectProposalView.as_view(), name="proposal-reject"),
]
