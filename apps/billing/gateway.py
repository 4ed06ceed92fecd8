"""
Thin wrapper around the Razorpay SDK.

Amounts cross this boundary as ``Decimal`` rupees and are converted to
paise here.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal

import razorpay
import requests
from django.conf import settings
from razorpay.errors import BadRequestError, GatewayError, ServerError

from .exceptions import GatewayNotConfigured, PaymentGatewayError

logger = logging.getLogger(__name__)

GATEWAY_ERRORS = (
    BadRequestError,
    ServerError,
    GatewayError,
    requests.RequestException,
)


def to_paise(amount):
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class RazorpayGateway:

    def __init__(self, key_id, key_secret, currency="INR"):
        self.key_id = key_id
        self.currency = currency
        self.client = razorpay.Client(auth=(key_id, key_secret))

    def create_order(self, amount, receipt, notes=None):
        try:
            return self.client.order.create(data={
                "amount": to_paise(amount),
                "currency": self.currency,
                "receipt": str(receipt),
                "notes": notes or {},
            })
        except GATEWAY_ERRORS as exc:
            logger.error("Razorpay order creation failed for receipt %s: %s", receipt, exc)
            raise PaymentGatewayError(f"Could not create payment order: {exc}")

    def fetch_transfer_id(self, payment_id):
        """
        First Route transfer attached to a captured payment, if any.
        """
        response = self.client.payment.transfers(payment_id)
        items = response.get("items") or []
        if not items:
            return None
        return items[0].get("id")

    def transfer(self, account_id, amount, notes=None):
        try:
            return self.client.transfer.create(data={
                "account": account_id,
                "amount": to_paise(amount),
                "currency": self.currency,
                "notes": notes or {},
            })
        except GATEWAY_ERRORS as exc:
            logger.error("Razorpay transfer to %s failed: %s", account_id, exc)
            raise PaymentGatewayError(f"Could not transfer funds: {exc}")

    def create_linked_account(self, email, name):
        try:
            return self.client.account.create(data={
                "email": email,
                "legal_business_name": name,
                "type": "route",
            })
        except GATEWAY_ERRORS as exc:
            logger.error("Razorpay linked account creation failed for %s: %s", email, exc)
            raise PaymentGatewayError(f"Could not create payout account: {exc}")


def get_gateway():
    if not settings.RAZORPAY_KEY_ID or not settings.RAZORPAY_KEY_SECRET:
        raise GatewayNotConfigured()
    return RazorpayGateway(
        settings.RAZORPAY_KEY_ID,
        settings.RAZORPAY_KEY_SECRET,
        currency=settings.RAZORPAY_CURRENCY,
    )


def verify_webhook_signature(body, signature):
    """
    Check the ``x-razorpay-signature`` HMAC over the raw request body.

    Raises ``razorpay.errors.SignatureVerificationError`` on mismatch.
    """
    secret = settings.RAZORPAY_WEBHOOK_SECRET
    if not secret:
        raise GatewayNotConfigured("RAZORPAY_WEBHOOK_SECRET is not set.")

    utility = razorpay.Client(auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)).utility
    # undecodable bytes must fail the HMAC check rather than the decode
    return utility.verify_webhook_signature(body.decode("utf-8", errors="replace"), signature, secret)
