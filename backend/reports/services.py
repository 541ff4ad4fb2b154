"""
Time-bucketed statistics over orders.

Only completed work is counted: period statistics look at closed orders, waiter
statistics at served orders and cashier statistics at closed ones. Every query
is a single aggregation pushed down to the database.
"""

import logging
from operator import attrgetter
from dataclasses import dataclass, field
from decimal import Decimal

from django.db.models import Avg, Count, DurationField, ExpressionWrapper, F, Min, Sum
from django.db.models.functions import ExtractIsoYear, ExtractWeek, TruncDate, TruncMonth

from core_backend.exceptions import (
    AuthorizationError,
    NotFoundError,
    UnsupportedParameterError,
)
from core_backend.persistence import DEFAULT_TIMEOUT, bounded_call
from orders.models import Order
from users.permissions import is_self_or_admin
from users.registry import parse_staff_id, staff_exists

logger = logging.getLogger(__name__)

DAY = "day"
WEEK = "week"
MONTH = "month"
BUCKETS = (DAY, WEEK, MONTH)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

# Buckets sort on the label string, so "2024-W10" comes before "2024-W9".
BY_LABEL = attrgetter("label")


@dataclass
class AggregatedStat:
    label: str
    order_count: int
    total_revenue: Decimal
    average_order_value: Decimal


@dataclass
class OrderStats:
    order_count: int = 0
    total_revenue: Decimal = ZERO
    average_order_value: Decimal = ZERO


@dataclass
class PeriodStats:
    overall: OrderStats = field(default_factory=OrderStats)
    buckets: list = field(default_factory=list)


@dataclass
class WaiterBucket:
    label: str
    total_orders_served: int
    average_serving_time_minutes: float
    fastest_serving_time_minutes: int


@dataclass
class WaiterStats:
    total_orders_served: int = 0
    average_serving_time_minutes: float = 0.0
    fastest_serving_time_minutes: int = 0
    buckets: list = field(default_factory=list)


@dataclass
class CashierStats:
    total_orders_closed: int = 0
    total_revenue: Decimal = ZERO
    buckets: list = field(default_factory=list)


def check_bucket(bucket):
    if bucket not in BUCKETS:
        raise UnsupportedParameterError(
            f"Invalid 'group_by' parameter {bucket!r}. Allowed values are 'day', 'week', or 'month'."
        )


def bucket_keys(bucket, field_name):
    """
    Annotations that identify the bucket of `field_name`.

    The keys are the GROUP BY columns of the bucketed query.
    """
    if bucket == DAY:
        return {"bucket_day": TruncDate(field_name)}
    if bucket == WEEK:
        return {
            "bucket_iso_year": ExtractIsoYear(field_name),
            "bucket_iso_week": ExtractWeek(field_name),
        }
    return {"bucket_month": TruncMonth(field_name)}


def bucket_label(bucket, row):
    if bucket == DAY:
        return row["bucket_day"].isoformat()
    if bucket == WEEK:
        return f"{row['bucket_iso_year']}-W{row['bucket_iso_week']}"
    return row["bucket_month"].strftime("%Y-%m")


def average(total, count):
    if not count:
        return ZERO
    return (total / count).quantize(CENT)


def minutes(duration):
    if duration is None:
        return 0.0
    return duration.total_seconds() / 60


def whole_minutes(duration):
    if duration is None:
        return 0
    return int(duration.total_seconds() // 60)


def staff_pk(staff_id):
    pk = parse_staff_id(staff_id)
    if pk is None:
        raise NotFoundError(f"Staff member {staff_id} not found.")
    return pk


def serving_time():
    return ExpressionWrapper(F("served_at") - F("created_at"), output_field=DurationField())


class StatisticsService:
    """
    Revenue and productivity statistics.

    `authorize(caller_id, caller_role, target_staff_id) -> bool` decides who
    may read per-staff statistics; it is checked before any query runs.
    """

    def __init__(self, authorize=is_self_or_admin):
        self.authorize = authorize

    def period_stats(self, date_from, date_to, bucket, timeout=DEFAULT_TIMEOUT):
        """
        Closed orders created in [date_from, date_to), totalled overall and
        per day, ISO week or month of creation.

        Buckets and the overall figures come out of the same grouped query:
        the overall row is the sum of the bucket rows. Empty buckets are
        omitted, buckets are sorted by label and `date_from > date_to` is an
        empty result.
        """
        check_bucket(bucket)
        result = PeriodStats()
        if date_from > date_to:
            return result

        keys = bucket_keys(bucket, "created_at")
        with bounded_call(timeout):
            rows = list(
                Order.objects.filter(
                    created_at__gte=date_from,
                    created_at__lt=date_to,
                    closed_at__isnull=False,
                )
                .annotate(**keys)
                .values(*keys)
                .annotate(order_count=Count("id"), revenue=Sum("total_price"))
                .order_by()
            )

        total_count = 0
        total_revenue = ZERO
        for row in rows:
            revenue = row["revenue"] or ZERO
            total_count += row["order_count"]
            total_revenue += revenue
            result.buckets.append(
                AggregatedStat(
                    label=bucket_label(bucket, row),
                    order_count=row["order_count"],
                    total_revenue=revenue,
                    average_order_value=average(revenue, row["order_count"]),
                )
            )

        result.buckets.sort(key=BY_LABEL)
        result.overall = OrderStats(
            order_count=total_count,
            total_revenue=total_revenue,
            average_order_value=average(total_revenue, total_count),
        )
        logger.debug(
            f"Period stats {date_from} - {date_to} by {bucket}: "
            f"{total_count} order(s) in {len(result.buckets)} bucket(s)"
        )
        return result

    def waiter_stats(self, staff_id, date_from, date_to, bucket=None, timeout=DEFAULT_TIMEOUT):
        """
        Serving latency of orders served by `staff_id` in [date_from, date_to).

        Serving time is served_at - created_at. The average is reported in
        fractional minutes and the fastest in whole minutes, rounded down.
        """
        if bucket is not None:
            check_bucket(bucket)
        staff_id = staff_pk(staff_id)
        result = WaiterStats()
        if date_from > date_to:
            return result

        served = Order.objects.filter(
            handled_by_id=staff_id,
            served_at__gte=date_from,
            served_at__lt=date_to,
        ).annotate(serving_time=serving_time())
        latency = {
            "served_count": Count("id"),
            "avg_serving": Avg("serving_time", output_field=DurationField()),
            "min_serving": Min("serving_time", output_field=DurationField()),
        }

        with bounded_call(timeout):
            totals = served.aggregate(**latency)
            rows = []
            if bucket is not None:
                # Waiter buckets are keyed on created_at while the window
                # filters on served_at. Cashier buckets use closed_at for both.
                # Reports built on these numbers depend on that difference.
                keys = bucket_keys(bucket, "created_at")
                rows = list(
                    served.annotate(**keys).values(*keys).annotate(**latency).order_by()
                )

        result.total_orders_served = totals["served_count"]
        result.average_serving_time_minutes = minutes(totals["avg_serving"])
        result.fastest_serving_time_minutes = whole_minutes(totals["min_serving"])
        result.buckets = sorted(
            (
                WaiterBucket(
                    label=bucket_label(bucket, row),
                    total_orders_served=row["served_count"],
                    average_serving_time_minutes=minutes(row["avg_serving"]),
                    fastest_serving_time_minutes=whole_minutes(row["min_serving"]),
                )
                for row in rows
            ),
            key=BY_LABEL,
        )
        return result

    def cashier_stats(self, staff_id, date_from, date_to, bucket=None, timeout=DEFAULT_TIMEOUT):
        """Orders closed by `staff_id` in [date_from, date_to) and the revenue they brought in."""
        if bucket is not None:
            check_bucket(bucket)
        staff_id = staff_pk(staff_id)
        result = CashierStats()
        if date_from > date_to:
            return result

        closed = Order.objects.filter(
            closed_by_id=staff_id,
            closed_at__gte=date_from,
            closed_at__lt=date_to,
        )

        with bounded_call(timeout):
            totals = closed.aggregate(closed_count=Count("id"), revenue=Sum("total_price"))
            rows = []
            if bucket is not None:
                keys = bucket_keys(bucket, "closed_at")
                rows = list(
                    closed.annotate(**keys)
                    .values(*keys)
                    .annotate(closed_count=Count("id"), revenue=Sum("total_price"))
                    .order_by()
                )

        result.total_orders_closed = totals["closed_count"]
        result.total_revenue = totals["revenue"] or ZERO
        result.buckets = sorted(
            (
                AggregatedStat(
                    label=bucket_label(bucket, row),
                    order_count=row["closed_count"],
                    total_revenue=row["revenue"] or ZERO,
                    average_order_value=average(row["revenue"] or ZERO, row["closed_count"]),
                )
                for row in rows
            ),
            key=BY_LABEL,
        )
        return result

    def staff_waiter_stats(self, caller_id, caller_role, staff_id, date_from, date_to, bucket=None):
        self._check_staff_access(caller_id, caller_role, staff_id)
        return self.waiter_stats(staff_id, date_from, date_to, bucket)

    def staff_cashier_stats(self, caller_id, caller_role, staff_id, date_from, date_to, bucket=None):
        self._check_staff_access(caller_id, caller_role, staff_id)
        return self.cashier_stats(staff_id, date_from, date_to, bucket)

    def _check_staff_access(self, caller_id, caller_role, staff_id):
        if not self.authorize(caller_id, caller_role, staff_id):
            logger.warning(f"Staff {caller_id} ({caller_role}) denied statistics of staff {staff_id}")
            raise AuthorizationError("You may only view your own statistics.")
        with bounded_call():
            exists = staff_exists(staff_id)
        if not exists:
            raise NotFoundError(f"Staff member {staff_id} not found.")


statistics_service = StatisticsService()
