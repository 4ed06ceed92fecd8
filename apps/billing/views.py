import json
import logging

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST
from razorpay.errors import SignatureVerificationError
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.orders.models import Order
from apps.users.permissions import IsFreelancer
from .gateway import verify_webhook_signature
from .models import Payment
from .serializers import CreateRazorpayOrderSerializer, PaymentSerializer
from .services import EscrowService

logger = logging.getLogger(__name__)


class CreateRazorpayOrderView(APIView):
    """
    Open a gateway order for checkout. Returns what the checkout widget needs.
    """

    def post(self, request):
        serializer = CreateRazorpayOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        checkout = EscrowService.open_gateway_order(
            request.user, serializer.validated_data["order_id"]
        )
        return Response(checkout, status=status.HTTP_201_CREATED)


class ReleaseEscrowView(APIView):

    def post(self, request, payment_id):
        payment = EscrowService.release_escrow(request.user, payment_id)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_200_OK)


class OnboardFreelancerView(APIView):
    permission_classes = [IsFreelancer]

    def post(self, request):
        account_id = EscrowService.onboard_freelancer(request.user)
        return Response({"razorpay_account_id": account_id}, status=status.HTTP_200_OK)


class OrderPaymentsView(APIView):

    def get(self, request, order_id):
        order = get_object_or_404(Order, id=order_id)
        if not order.is_party(request.user):
            raise PermissionDenied("Unauthorized")

        payments = Payment.objects.filter(order=order).order_by("-created_at")
        return Response(PaymentSerializer(payments, many=True).data)


@csrf_exempt
@require_POST
def razorpay_webhook(request):
    signature = request.headers.get("x-razorpay-signature")
    if not signature:
        logger.error("Razorpay webhook signature missing from headers.")
        return HttpResponse("Signature missing", status=401)

    try:
        verify_webhook_signature(request.body, signature)
    except SignatureVerificationError:
        logger.error("Razorpay webhook verification failed: signatures do not match.")
        return HttpResponse("Webhook verification failed", status=401)
    except Exception:
        logger.exception("Error during Razorpay webhook verification")
        return HttpResponse("Webhook Error", status=400)

    # Verified deliveries are always acknowledged so the gateway does not retry
    try:
        event = json.loads(request.body)
        EscrowService.handle_webhook_event(event)
    except Exception:
        logger.exception("Failed to process Razorpay webhook event")

    return HttpResponse(status=200)
