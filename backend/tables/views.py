import logging

from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core_backend.exceptions import ConflictError
from orders.serializers import ActiveTotalSerializer
from orders.services import order_service, table_bill_service
from users.permissions import CanCloseOrders, IsAdmin, IsAnyStaff

from .models import Table
from .serializers import TableSerializer

logger = logging.getLogger(__name__)


class TableViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Table registry plus the table-scoped bill operations.

    Guests may read a table and its running bill; staff list tables, admins
    add and remove them and cashiers settle a table's served orders at once.
    """

    queryset = Table.objects.all()
    serializer_class = TableSerializer
    pagination_class = None

    def get_permissions(self):
        if self.action in ("retrieve", "active_total"):
            return [AllowAny()]
        if self.action == "list":
            return [IsAnyStaff()]
        if self.action == "close":
            return [CanCloseOrders()]
        return [IsAdmin()]

    def perform_create(self, serializer):
        table = serializer.save()
        logger.info(f"Table {table.name} registered as {table.id}")

    def perform_destroy(self, instance):
        if instance.orders.exists():
            raise ConflictError("Tables with orders cannot be removed.")
        instance.delete()
        logger.info(f"Table {instance.name} removed")

    @action(detail=True, methods=["post"])
    def close(self, request, pk=None):
        closed = order_service.close_table(pk, request.user.pk)
        return Response({"table_id": str(pk), "closed": closed})

    @action(detail=True, methods=["get"], url_path="active-total")
    def active_total(self, request, pk=None):
        bill = table_bill_service.active_total(pk)
        return Response(ActiveTotalSerializer(bill).data)
