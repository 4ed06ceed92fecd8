from django.urls import path
from .views import (
    MyVerificationStatusView,
    PendingVerificationsView,
    ReviewVerificationView,
    SubmitVerificationView,
    VerificationDetailView,
)

urlpatterns = [
    path("verification/", SubmitVerificationView.as_view(), name="verification-submit"),
    path("verification/me/", MyVerificationStatusView.as_view(), name="verification-me"),
    path("admin/verifications/", PendingVerificationsView.as_view(), name="verification-pending"),
    path("admin/verifications/<int:id>/", VerificationDetailView.as_view(), name="verification-detail"),
    path("admin/verifications/<int:id>/review/", ReviewVerificationView.as_view(), name="verification-review"),
]
