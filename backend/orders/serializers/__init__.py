"""
Orders serializers package.
"""

from .item_serializers import MenuItemSnapshotSerializer, OrderItemSerializer
from .order_serializers import (
    ActiveTotalSerializer,
    BillLineSerializer,
    OrderCreateSerializer,
    OrderItemsInputSerializer,
    OrderSerializer,
)

__all__ = [
    "MenuItemSnapshotSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "OrderItemsInputSerializer",
    "OrderCreateSerializer",
    "BillLineSerializer",
    "ActiveTotalSerializer",
]
