from django.urls import path
from .views import (
    CancelOrderView,
    CompleteOrderView,
    DeliverOrderView,
    MyOrdersView,
    OrderDetailView,
    ReviewOrderView,
)

urlpatterns = [
    path("orders/", MyOrdersView.as_view(), name="order-list"),
    path("orders/<int:id>/", OrderDetailView.as_view(), name="order-detail"),
    path("orders/<int:id>/deliver/", DeliverOrderView.as_view(), name="order-deliver"),
    path("orders/<int:id>/complete/", CompleteOrderView.as_view(), name="order-complete"),
    path("orders/<int:id>/cancel/", CancelOrderView.as_view(), name="order-cancel"),
    path("orders/<int:id>/review/", ReviewOrderView.as_view(), name="order-review"),
]
