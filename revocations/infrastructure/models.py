"""
Blob model backing the Django storage adapter.
"""
from django.db import models


class Blob(models.Model):
    """
    A named binary object with a generation number.

    The generation increases by one on every successful write and is the
    version token for conditional writes.
    """

    path = models.CharField(max_length=255, unique=True)
    data = models.BinaryField()
    generation = models.PositiveBigIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "revocations"
        db_table = "blobs"

    def __str__(self):
        return f"{self.path}#{self.generation}"
