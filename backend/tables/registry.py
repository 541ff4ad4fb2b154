"""
Table registry lookups used by the order services.

The services receive `table_exists` as an injected collaborator so they can
be exercised without the tables app.
"""

from django.core.exceptions import ValidationError as DjangoValidationError

from .models import Table


def table_exists(table_id):
    """Return True when `table_id` names a registered table."""
    try:
        return Table.objects.filter(pk=table_id).exists()
    except (DjangoValidationError, ValueError):
        # Not a well-formed UUID, so it cannot name a table.
        return False
