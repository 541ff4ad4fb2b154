import logging
import uuid
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import ConflictError, NotFoundError
from core_backend.persistence import DEFAULT_TIMEOUT, bounded_call
from notifications.services import ORDER_CREATED, order_event_hub
from orders.models import Order, OrderItem
from tables.registry import table_exists
from users.registry import parse_staff_id, staff_exists

from .catalog import validate_menu_items

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def parse_id(value):
    """Return `value` as a UUID, or None when it cannot name any record."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def compute_total(lines):
    """Sum of unit price x quantity over validated item snapshots."""
    total = sum(
        (Decimal(line["unit_price"]) * line["quantity"] for line in lines),
        Decimal("0"),
    )
    return total.quantize(CENT)


class OrderService:
    """
    Order lifecycle: create, serve, close, update.

    Transitions are single conditional UPDATE statements (`filter(predicate)
    .update(mutation)`), so two racing callers can never both win. When an
    update matches nothing, a follow-up read decides between NotFoundError and
    ConflictError for the error message; it never decides whether to write.
    """

    def __init__(
        self,
        validate_items=validate_menu_items,
        table_exists=table_exists,
        notifier=order_event_hub,
        staff_exists=staff_exists,
    ):
        self.validate_items = validate_items
        self.table_exists = table_exists
        self.staff_exists = staff_exists
        self.notifier = notifier

    def create_order(self, table_id, items, timeout=DEFAULT_TIMEOUT):
        """
        Create an OPEN order for `table_id` from raw item payloads.

        Raises ValidationError for bad items, NotFoundError for an unknown
        table and PersistenceError when the store fails or times out. Staff
        listening for new orders are notified once the order is committed.
        """
        lines = self.validate_items(items)
        table_pk = parse_id(table_id)

        with bounded_call(timeout):
            if table_pk is None or not self.table_exists(table_pk):
                raise NotFoundError(f"Table {table_id} not found.")

            order = Order.objects.create(table_id=table_pk, total_price=compute_total(lines))
            OrderItem.objects.bulk_create(OrderItem(order=order, **line) for line in lines)
            transaction.on_commit(lambda: self._announce(order), robust=True)

        logger.info(
            f"Order {order.id} created for table {table_pk} "
            f"with {len(lines)} line(s), total {order.total_price}"
        )
        return order

    def serve_order(self, order_id, staff_id, timeout=DEFAULT_TIMEOUT):
        """Mark an OPEN order as served by `staff_id`. Succeeds at most once per order."""
        order_pk = parse_id(order_id)
        now = timezone.now()

        with bounded_call(timeout):
            self._check_staff(staff_id)
            updated = 0
            if order_pk is not None:
                updated = Order.objects.filter(pk=order_pk, served_at__isnull=True).update(
                    served_at=now, handled_by_id=staff_id, updated_at=now
                )
            if not updated:
                self._raise_serve_failure(order_pk, order_id)

        logger.info(f"Order {order_pk} served by staff {staff_id}")

    def close_order(self, order_id, staff_id, timeout=DEFAULT_TIMEOUT):
        """
        Close one SERVED order on behalf of `staff_id` and return 1.

        Raises ConflictError when the order is not served yet or already
        closed, NotFoundError when it does not exist.
        """
        order_pk = parse_id(order_id)
        now = timezone.now()

        with bounded_call(timeout):
            self._check_staff(staff_id)
            updated = 0
            if order_pk is not None:
                updated = Order.objects.filter(
                    pk=order_pk, served_at__isnull=False, closed_at__isnull=True
                ).update(closed_at=now, closed_by_id=staff_id, updated_at=now)
            if not updated:
                self._raise_close_failure(order_pk, order_id)

        logger.info(f"Order {order_pk} closed by staff {staff_id}")
        return updated

    def close_table(self, table_id, staff_id, timeout=DEFAULT_TIMEOUT):
        """
        Close every SERVED order of a table in one statement and return how
        many were closed. Orders that were never served stay open.

        Raises NotFoundError when nothing matched.
        """
        table_pk = parse_id(table_id)
        now = timezone.now()

        with bounded_call(timeout):
            self._check_staff(staff_id)
            updated = 0
            if table_pk is not None:
                updated = Order.objects.filter(
                    table_id=table_pk, served_at__isnull=False, closed_at__isnull=True
                ).update(closed_at=now, closed_by_id=staff_id, updated_at=now)
            if not updated:
                if table_pk is None or not self.table_exists(table_pk):
                    raise NotFoundError(f"Table {table_id} not found.")
                logger.warning(f"Close on table {table_pk} matched no served, unclosed orders")
                raise NotFoundError(f"Table {table_id} has no served orders awaiting payment.")

        logger.info(f"Closed {updated} order(s) on table {table_pk} by staff {staff_id}")
        return updated

    def update_order_items(self, order_id, items, timeout=DEFAULT_TIMEOUT):
        """
        Replace the items of an order that is not closed and recompute its
        total. Lifecycle timestamps are left untouched.

        Closed orders are immutable records and are rejected with ConflictError.
        """
        lines = self.validate_items(items)
        order_pk = parse_id(order_id)
        now = timezone.now()

        with bounded_call(timeout):
            updated = 0
            if order_pk is not None:
                # The conditional UPDATE takes the row lock before the items
                # are swapped, so a concurrent close waits for this transaction.
                updated = Order.objects.filter(pk=order_pk, closed_at__isnull=True).update(
                    total_price=compute_total(lines), updated_at=now
                )
            if not updated:
                if order_pk is not None and Order.objects.filter(pk=order_pk).exists():
                    logger.warning(f"Rejected item update on closed order {order_pk}")
                    raise ConflictError("Closed orders cannot be modified.")
                raise NotFoundError(f"Order {order_id} not found.")

            OrderItem.objects.filter(order_id=order_pk).delete()
            OrderItem.objects.bulk_create(OrderItem(order_id=order_pk, **line) for line in lines)
            order = Order.objects.prefetch_related("items").get(pk=order_pk)

        logger.info(f"Order {order_pk} items replaced, new total {order.total_price}")
        return order

    def get_order(self, order_id, timeout=DEFAULT_TIMEOUT):
        order_pk = parse_id(order_id)
        with bounded_call(timeout):
            order = None
            if order_pk is not None:
                order = Order.objects.prefetch_related("items").filter(pk=order_pk).first()
        if order is None:
            raise NotFoundError(f"Order {order_id} not found.")
        return order

    def _check_staff(self, staff_id):
        # Attribution foreign keys are enforced only at commit.
        if parse_staff_id(staff_id) is None or not self.staff_exists(staff_id):
            raise NotFoundError(f"Staff member {staff_id} not found.")

    def _raise_serve_failure(self, order_pk, order_id):
        if order_pk is not None and Order.objects.filter(pk=order_pk).exists():
            logger.warning(f"Rejected serve on order {order_pk}: already served")
            raise ConflictError("Order has already been served.")
        raise NotFoundError(f"Order {order_id} not found.")

    def _raise_close_failure(self, order_pk, order_id):
        state = None
        if order_pk is not None:
            state = Order.objects.filter(pk=order_pk).values("served_at", "closed_at").first()
        if state is None:
            raise NotFoundError(f"Order {order_id} not found.")
        if state["served_at"] is None:
            logger.warning(f"Rejected close on order {order_pk}: not served yet")
            raise ConflictError("Order must be served before it can be closed.")
        logger.warning(f"Rejected close on order {order_pk}: already closed")
        raise ConflictError("Order is already closed.")

    def _announce(self, order):
        try:
            self.notifier.publish(
                ORDER_CREATED,
                {"table_id": str(order.table_id), "order_id": str(order.id)},
            )
        except Exception:
            logger.warning(f"New-order notification for {order.id} failed", exc_info=True)


order_service = OrderService()
