from decimal import Decimal

from rest_framework import serializers

from orders.models import OrderItem


class MenuItemSnapshotSerializer(serializers.Serializer):
    """
    Validates one ordered line: a copy of a menu item plus a quantity.

    Field rules mirror the menu catalog so a snapshot can only carry data the
    catalog itself would accept. `price` is stored as the line's `unit_price`.
    """

    menu_item_id = serializers.CharField(max_length=64)
    name = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(min_length=5, max_length=500)
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0.01"),
        source="unit_price",
    )
    category = serializers.CharField(min_length=2, max_length=100)
    image = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1, default=1)


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "menu_item_id",
            "name",
            "description",
            "category",
            "image",
            "unit_price",
            "quantity",
            "line_total",
        ]
        read_only_fields = fields
