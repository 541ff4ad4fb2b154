from rest_framework import serializers

from orders.models import Order

from .item_serializers import OrderItemSerializer


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    state = serializers.CharField(read_only=True)
    is_closed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "table",
            "items",
            "total_price",
            "state",
            "is_closed",
            "created_at",
            "updated_at",
            "served_at",
            "handled_by",
            "closed_at",
            "closed_by",
        ]
        read_only_fields = fields


class OrderItemsInputSerializer(serializers.Serializer):
    """
    Envelope for the item list on create and update.

    Only the shape is checked here; each line is validated by the catalog
    validator inside OrderService so non-HTTP callers get the same rules.
    """

    items = serializers.ListField(child=serializers.DictField(), allow_empty=True)


class OrderCreateSerializer(OrderItemsInputSerializer):
    table = serializers.CharField(max_length=64)


class BillLineSerializer(serializers.Serializer):
    menu_item_id = serializers.CharField()
    name = serializers.CharField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantity = serializers.IntegerField()
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2)


class ActiveTotalSerializer(serializers.Serializer):
    table_id = serializers.CharField()
    items = BillLineSerializer(many=True)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    order_ids = serializers.ListField(child=serializers.CharField())
