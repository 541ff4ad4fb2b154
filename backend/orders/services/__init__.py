"""
Orders services package.

- OrderService: order lifecycle (create, serve, close, update)
- TableBillService: consolidated bill of a table's open orders
- validate_menu_items: default catalog validator for ordered items
"""

from .catalog import validate_menu_items
from .order_service import OrderService, compute_total, order_service
from .table_bill_service import BillLine, OrderTotal, TableBillService, table_bill_service

__all__ = [
    "OrderService",
    "order_service",
    "compute_total",
    "TableBillService",
    "table_bill_service",
    "BillLine",
    "OrderTotal",
    "validate_menu_items",
]
