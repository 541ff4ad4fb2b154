"""
Default catalog validator for ordered items.

`validate_menu_items` is injected into OrderService; swapping it lets a
deployment check items against a real menu store instead of validating the
submitted snapshot on its own.
"""

from core_backend.exceptions import ValidationError
from orders.serializers import MenuItemSnapshotSerializer


def validate_menu_items(items):
    """
    Validate a list of item payloads and return their snapshots.

    Each snapshot is a dict with `menu_item_id`, `name`, `description`,
    `category`, `image`, `unit_price` (Decimal) and `quantity` (int >= 1).
    Raises ValidationError with per-line field errors.
    """
    if not items:
        raise ValidationError(
            "An order needs at least one item.",
            detail={"items": ["This list may not be empty."]},
        )

    serializer = MenuItemSnapshotSerializer(data=items, many=True)
    if not serializer.is_valid():
        errors = serializer.errors
        if isinstance(errors, list):
            errors = {
                str(index): line_errors for index, line_errors in enumerate(errors) if line_errors
            }
        raise ValidationError("One or more items are invalid.", detail={"items": errors})
    return [dict(line) for line in serializer.validated_data]
