import logging
from dataclasses import dataclass, field
from decimal import Decimal

from core_backend.persistence import DEFAULT_TIMEOUT, bounded_call
from orders.models import Order

from .order_service import CENT, parse_id

logger = logging.getLogger(__name__)


@dataclass
class BillLine:
    menu_item_id: str
    name: str
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self):
        return (self.unit_price * self.quantity).quantize(CENT)


@dataclass
class OrderTotal:
    """The consolidated bill of a table's open orders."""

    table_id: str
    items: list = field(default_factory=list)
    total_price: Decimal = Decimal("0.00")
    order_ids: list = field(default_factory=list)


class TableBillService:
    """Builds one bill out of every order still open on a table."""

    def active_total(self, table_id, timeout=DEFAULT_TIMEOUT):
        """
        Merge the lines of all OPEN and SERVED orders of `table_id`.

        Lines are keyed by menu item, quantities are summed and the total is
        recomputed from the merged quantities, so the result does not depend on
        how the same item was spread across orders. Lines keep the order in
        which their menu item first appeared (oldest order first) and the
        first-seen snapshot's name and price. A table without open orders
        yields an empty bill.
        """
        result = OrderTotal(table_id=str(table_id))
        table_pk = parse_id(table_id)
        if table_pk is None:
            return result

        with bounded_call(timeout):
            orders = list(
                Order.objects.filter(table_id=table_pk, closed_at__isnull=True)
                .order_by("created_at", "id")
                .prefetch_related("items")
            )

        merged = {}
        for order in orders:
            result.order_ids.append(str(order.id))
            for item in order.items.all():
                line = merged.get(item.menu_item_id)
                if line is None:
                    merged[item.menu_item_id] = BillLine(
                        menu_item_id=item.menu_item_id,
                        name=item.name,
                        unit_price=item.unit_price,
                        quantity=item.quantity,
                    )
                else:
                    line.quantity += item.quantity

        result.items = list(merged.values())
        result.total_price = sum(
            (line.line_total for line in result.items), Decimal("0")
        ).quantize(CENT)
        logger.debug(
            f"Active total for table {table_pk}: {len(orders)} order(s), "
            f"{len(result.items)} line(s), {result.total_price}"
        )
        return result


table_bill_service = TableBillService()
