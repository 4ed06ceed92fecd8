from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Order
from .permissions import IsOrderParty
from .serializers import DeliverOrderSerializer, OrderSerializer, ReviewSerializer
from .services.order_lifecycle import cancel_order, complete_order, deliver_order, review_order


class MyOrdersView(generics.ListAPIView):
    """
    Orders of the caller, optionally narrowed with ``?as=client`` or
    ``?as=freelancer``.
    """
    serializer_class = OrderSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        user = self.request.user
        if not user.is_authenticated:
            return Order.objects.none()

        side = self.request.query_params.get("as")
        if side == "client":
            queryset = Order.objects.filter(client=user)
        elif side == "freelancer":
            queryset = Order.objects.filter(freelancer=user)
        else:
            queryset = Order.objects.filter(Q(client=user) | Q(freelancer=user))

        return queryset.select_related("client", "freelancer").order_by("-created_at")


class OrderDetailView(generics.RetrieveAPIView):
    queryset = Order.objects.select_related("client", "freelancer")
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated, IsOrderParty]
    lookup_field = "id"


class OrderActionView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsOrderParty]

    def get_order(self, request, id):
        order = get_object_or_404(Order, id=id)
        self.check_object_permissions(request, order)
        return order


class DeliverOrderView(OrderActionView):

    def post(self, request, id):
        order = self.get_order(request, id)
        serializer = DeliverOrderSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        order = deliver_order(
            request.user,
            order,
            serializer.validated_data["message"],
            serializer.validated_data.get("deliverables"),
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class CompleteOrderView(OrderActionView):

    def post(self, request, id):
        order = complete_order(request.user, self.get_order(request, id))
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class CancelOrderView(OrderActionView):

    def post(self, request, id):
        order = cancel_order(request.user, self.get_order(request, id))
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class ReviewOrderView(OrderActionView):

    def post(self, request, id):
        order = self.get_order(request, id)
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = review_order(
            request.user,
            order,
            rating=serializer.validated_data["rating"],
            comment=serializer.validated_data.get("comment", ""),
            is_public=serializer.validated_data.get("is_public", True),
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)
