from datetime import datetime, time, timezone as dt_timezone

from rest_framework import serializers


def start_of_day(value):
    """Midnight UTC of a calendar date."""
    return datetime.combine(value, time.min, tzinfo=dt_timezone.utc)


class StatisticsParameterSerializer(serializers.Serializer):
    """
    Validate statistics query parameters.

    `from` and `to` are YYYY-MM-DD dates taken as midnight UTC; the window is
    [from, to). `group_by` is passed through unchecked so that the service
    reports an unsupported value itself.
    """

    group_by = serializers.CharField(required=False, allow_blank=True)

    def get_fields(self):
        # "from" is a keyword, so the date fields are declared here.
        fields = super().get_fields()
        fields["from"] = serializers.DateField(input_formats=["%Y-%m-%d"])
        fields["to"] = serializers.DateField(input_formats=["%Y-%m-%d"])
        return fields

    def to_internal_value(self, data):
        values = super().to_internal_value(data)
        values["from"] = start_of_day(values["from"])
        values["to"] = start_of_day(values["to"])
        return values


class AggregatedStatSerializer(serializers.Serializer):
    label = serializers.CharField()
    order_count = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    average_order_value = serializers.DecimalField(max_digits=14, decimal_places=2)


class OrderStatsSerializer(serializers.Serializer):
    order_count = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    average_order_value = serializers.DecimalField(max_digits=14, decimal_places=2)


class PeriodStatsSerializer(serializers.Serializer):
    overall = OrderStatsSerializer()
    buckets = AggregatedStatSerializer(many=True)


class WaiterBucketSerializer(serializers.Serializer):
    label = serializers.CharField()
    total_orders_served = serializers.IntegerField()
    average_serving_time_minutes = serializers.FloatField()
    fastest_serving_time_minutes = serializers.IntegerField()


class WaiterStatsSerializer(serializers.Serializer):
    total_orders_served = serializers.IntegerField()
    average_serving_time_minutes = serializers.FloatField()
    fastest_serving_time_minutes = serializers.IntegerField()
    buckets = WaiterBucketSerializer(many=True)


class CashierStatsSerializer(serializers.Serializer):
    total_orders_closed = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    buckets = AggregatedStatSerializer(many=True)
