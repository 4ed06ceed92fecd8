from django.urls import path
from .views import (
    CreateRazorpayOrderView,
    OnboardFreelancerView,
    OrderPaymentsView,
    ReleaseEscrowView,
)

urlpatterns = [
    path("payments/razorpay-order/", CreateRazorpayOrderView.as_view(), name="razorpay-order"),
    path("payments/<int:payment_id>/release/", ReleaseEscrowView.as_view(), name="release-escrow"),
    path("payments/onboard/", OnboardFreelancerView.as_view(), name="payout-onboard"),
    path("orders/<int:order_id>/payments/", OrderPaymentsView.as_view(), name="order-payments"),
]
