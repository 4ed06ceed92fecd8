from rest_framework import serializers

from .models import Payment


class CreateRazorpayOrderSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()


class PaymentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Payment
        fields = [
            "id",
            "order",
            "razorpay_order_id",
            "razorpay_payment_id",
            "razorpay_transfer_id",
            "amount",
            "currency",
            "status",
            "created_at",
            "funded_at",
            "released_at",
        ]
        read_only_fields = fields
