from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("menu_item_id", "name", "category", "unit_price", "quantity", "get_line_total")
    readonly_fields = fields
    can_delete = False

    def get_line_total(self, obj):
        return f"{obj.line_total:,.2f}"

    get_line_total.short_description = "Line Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Read-mostly admin for orders.

    Lifecycle fields are read-only here; transitions belong to OrderService.
    """

    list_display = (
        "id",
        "table",
        "total_price",
        "get_state",
        "created_at",
        "served_at",
        "handled_by",
        "closed_at",
        "closed_by",
    )
    list_filter = ("table", "created_at", "closed_at")
    search_fields = ("id", "table__name")
    date_hierarchy = "created_at"
    inlines = [OrderItemInline]
    readonly_fields = (
        "id",
        "total_price",
        "created_at",
        "updated_at",
        "served_at",
        "handled_by",
        "closed_at",
        "closed_by",
    )

    def get_state(self, obj):
        return obj.state.label

    get_state.short_description = "State"
