from rest_framework import status
from rest_framework.exceptions import APIException


class PaymentGatewayError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment gateway request failed."
    default_code = "payment_gateway_error"


class GatewayNotConfigured(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Razorpay API keys are missing. Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET."
    default_code = "gateway_not_configured"


class PayoutAccountMissing(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Freelancer has not connected a payout account"
    default_code = "payout_account_missing"
