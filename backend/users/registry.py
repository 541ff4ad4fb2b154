"""
Staff lookups used by the order and statistics services.

Staff ids are integer primary keys; anything else cannot name a staff
member and is treated as unknown rather than raised.
"""

from .models import User


def parse_staff_id(value):
    """Return `value` as a staff primary key, or None when it cannot be one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def staff_exists(staff_id):
    """Return True when `staff_id` names a staff account."""
    staff_pk = parse_staff_id(staff_id)
    if staff_pk is None:
        return False
    return User.objects.filter(pk=staff_pk).exists()
