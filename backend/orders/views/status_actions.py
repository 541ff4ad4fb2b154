import logging

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import OrderSerializer
from users.permissions import CanCloseOrders, CanServeOrders

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Lifecycle transition actions for OrderViewSet.

    The transition itself is one conditional update inside OrderService; the
    order is read back afterwards only to build the response.
    """

    @action(detail=True, methods=["post"], permission_classes=[CanServeOrders])
    def serve(self, request: Request, pk=None) -> Response:
        self.order_service.serve_order(pk, request.user.pk)
        order = self.order_service.get_order(pk)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"], permission_classes=[CanCloseOrders])
    def close(self, request: Request, pk=None) -> Response:
        closed = self.order_service.close_order(pk, request.user.pk)
        order = self.order_service.get_order(pk)
        return Response({"closed": closed, "order": OrderSerializer(order).data})
