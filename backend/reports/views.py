import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.exceptions import ValidationError
from users.permissions import IsAdmin, IsAnyStaff, staff_identity

from .serializers import (
    CashierStatsSerializer,
    PeriodStatsSerializer,
    StatisticsParameterSerializer,
    WaiterStatsSerializer,
)
from .services import statistics_service

logger = logging.getLogger(__name__)


def parse_parameters(request):
    serializer = StatisticsParameterSerializer(data=request.query_params)
    if not serializer.is_valid():
        raise ValidationError("Invalid statistics parameters.", detail=serializer.errors)
    return serializer.validated_data


class OrderStatisticsViewSet(viewsets.ViewSet):
    """Revenue statistics over closed orders. Admins only."""

    permission_classes = [IsAdmin]
    statistics_service = statistics_service

    def list(self, request):
        params = parse_parameters(request)
        stats = self.statistics_service.period_stats(
            params["from"], params["to"], params.get("group_by", "")
        )
        return Response(PeriodStatsSerializer(stats).data)


class StaffStatisticsViewSet(viewsets.ViewSet):
    """
    Per-staff productivity statistics.

    Staff may read their own figures and admins anyone's; the check is made
    by StatisticsService before any query runs.
    """

    permission_classes = [IsAnyStaff]
    lookup_value_regex = r"\d+"
    statistics_service = statistics_service

    @action(detail=True, methods=["get"])
    def waiter(self, request, pk=None):
        params = parse_parameters(request)
        caller_id, caller_role = staff_identity(request.user)
        stats = self.statistics_service.staff_waiter_stats(
            caller_id, caller_role, pk, params["from"], params["to"], params.get("group_by") or None
        )
        return Response(WaiterStatsSerializer(stats).data)

    @action(detail=True, methods=["get"])
    def cashier(self, request, pk=None):
        params = parse_parameters(request)
        caller_id, caller_role = staff_identity(request.user)
        stats = self.statistics_service.staff_cashier_stats(
            caller_id, caller_role, pk, params["from"], params["to"], params.get("group_by") or None
        )
        return Response(CashierStatsSerializer(stats).data)
