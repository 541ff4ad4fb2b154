import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Order(models.Model):
    """
    One round of items ordered at a table.

    Lifecycle: OPEN --serve--> SERVED --close--> CLOSED. The timestamps are the
    state; `served_at` is written at most once and `closed_at` only after it.
    Both transitions are performed by conditional updates in OrderService,
    never by saving a loaded instance.
    """

    class State(models.TextChoices):
        OPEN = "OPEN", _("Open")
        SERVED = "SERVED", _("Served")
        CLOSED = "CLOSED", _("Closed")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    table = models.ForeignKey(
        "tables.Table",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Sum of unit price x quantity, frozen when the items were last set."),
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    served_at = models.DateTimeField(null=True, blank=True)
    handled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="served_orders",
        help_text=_("Staff member who served the order."),
    )
    closed_at = models.DateTimeField(null=True, blank=True)
    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="closed_orders",
        help_text=_("Staff member who took payment and closed the order."),
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["table", "closed_at"], name="order_table_closed_idx"),
            models.Index(fields=["handled_by", "served_at"], name="order_handler_served_idx"),
            models.Index(fields=["closed_by", "closed_at"], name="order_closer_closed_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.state})"

    @property
    def state(self):
        if self.closed_at is not None:
            return self.State.CLOSED
        if self.served_at is not None:
            return self.State.SERVED
        return self.State.OPEN

    @property
    def is_closed(self):
        return self.closed_at is not None


class OrderItem(models.Model):
    """
    A snapshot of a menu item at ordering time plus the ordered quantity.

    The snapshot is copied, not referenced, so later menu edits never change
    an order's lines or its total.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item_id = models.CharField(
        max_length=64,
        help_text=_("Identifier of the menu item this line was copied from."),
    )
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=500)
    category = models.CharField(max_length=100)
    image = models.CharField(max_length=255)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order", "menu_item_id"], name="item_order_menu_idx"),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @property
    def line_total(self):
        return self.unit_price * self.quantity
