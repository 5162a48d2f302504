"""Base abstract model shared by the domain modules.

Provides ``BaseModel``: UUIDv7 primary key + ``created_at`` / ``updated_at``
timestamps.

Timestamps are **not** managed by ``auto_now`` / ``auto_now_add``.  The
service layer assigns them explicitly on create and on every modification,
so the values a caller sees are exactly the values that were persisted.
Both fields default to ``timezone.now`` so rows created outside the service
(fixtures, admin, shell) are still valid.
"""

from __future__ import annotations

import uuid6
from django.db import models
from django.utils import timezone


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp columns."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        abstract = True

