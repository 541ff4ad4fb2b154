import uuid

from django.db import models


class Table(models.Model):
    """A physical table in the cafe. Orders are placed against a table."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=50,
        unique=True,
        help_text="Display name printed on the table, e.g. 'T4' or 'Terrace 2'.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
