import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Order listing filters.

    - `is_closed`: true for CLOSED orders, false for OPEN and SERVED ones
    - `served`: whether the order has been served (closed orders count as served)
    - `table`: table id
    - `date`: calendar day (YYYY-MM-DD, UTC) the order was created on
    """

    is_closed = django_filters.BooleanFilter(field_name="closed_at", method="filter_is_set")
    served = django_filters.BooleanFilter(field_name="served_at", method="filter_is_set")
    table = django_filters.UUIDFilter(field_name="table_id")
    date = django_filters.DateFilter(field_name="created_at", lookup_expr="date")

    class Meta:
        model = Order
        fields = ["is_closed", "served", "table", "date"]

    def filter_is_set(self, queryset, name, value):
        return queryset.filter(**{f"{name}__isnull": not value})
