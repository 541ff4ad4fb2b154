import logging

from rest_framework import mixins, status, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    OrderCreateSerializer,
    OrderItemsInputSerializer,
    OrderSerializer,
)
from orders.services import order_service
from users.permissions import IsAnyStaff

from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(StatusActionsMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Orders API.

    Anyone (including guests at the table) may place an order; reading and
    editing orders is for staff. Writes go through OrderService so the
    lifecycle rules apply no matter which client calls.
    """

    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    order_service = order_service
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_queryset(self):
        return (
            Order.objects.select_related("table")
            .prefetch_related("items")
            .order_by("-created_at")
        )

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        if self.action in ("serve", "close"):
            return super().get_permissions()
        return [IsAnyStaff()]

    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.order_service.create_order(
            serializer.validated_data["table"], serializer.validated_data["items"]
        )
        order = self.order_service.get_order(order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(OrderSerializer(self.order_service.get_order(pk)).data)

    def partial_update(self, request, pk=None):
        serializer = OrderItemsInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.order_service.update_order_items(pk, serializer.validated_data["items"])
        return Response(OrderSerializer(order).data)
