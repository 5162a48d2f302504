"""Customer model.

Business rules implemented at the persistence level:
- ``customer_code`` is unique across all customers (unique index).
- ``email`` is unique across all customers (unique index).
- ``status`` is never null; defaults to ``ACTIVE``.
- Delete is physical: a deleted customer leaves no row behind, so its
  code and email become available again.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class CustomerStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"


class Customer(BaseModel):
    """Customer aggregate root.

    Optional text columns (``phone``, ``address``) store ``""`` when empty.
    """

    customer_code = models.CharField(max_length=20, unique=True)
    full_name = models.CharField(max_length=100)
    email = models.EmailField(max_length=254, unique=True)
    phone = models.CharField(max_length=21, blank=True, default="")
    address = models.TextField(max_length=500, blank=True, default="")
    status = models.CharField(
        max_length=10,
        choices=CustomerStatus.choices,
        default=CustomerStatus.ACTIVE,
    )

    class Meta:
        db_table = "customers"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["status"], name="customers_status_idx"),
            models.Index(fields=["-created_at"], name="customers_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.full_name} ({self.customer_code})"
