"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
(and writes return ``False``) instead of raising, so the Service Layer
decides how to translate a missing entity into an API response.

Writes run inside ``transaction.atomic()``.  ``update`` locks the row with
``select_for_update()`` so concurrent modifications of the same customer
are serialised.  The unique indexes on ``customer_code`` and ``email`` are
the final authority on uniqueness: a losing concurrent writer gets an
``IntegrityError`` which is left to propagate to the service.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet

from modules.core.pagination import PageRequest
from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)

SORTABLE_FIELDS = {
    "id": "id",
    "customer_code": "customer_code",
    "customerCode": "customer_code",
    "full_name": "full_name",
    "fullName": "full_name",
    "email": "email",
    "status": "status",
    "created_at": "created_at",
    "createdAt": "created_at",
}
DEFAULT_SORT_FIELD = "id"


def resolve_sort_field(sort_by: Optional[str]) -> str:
    """Map a client sort key onto a model field; unknown keys sort by ``id``."""
    return SORTABLE_FIELDS.get(sort_by or "", DEFAULT_SORT_FIELD)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Single-record look-ups
    # ------------------------------------------------------------------

    def _by_id(self, id: Any) -> QuerySet:
        return Customer.objects.filter(id=id)

    def get_by_id(self, id: Any) -> Optional[Customer]:
        """Retrieve a customer by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return self._by_id(id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_code(self, code: str) -> Optional[Customer]:
        return Customer.objects.filter(customer_code=code).first()

    def get_by_email(self, email: str) -> Optional[Customer]:
        return Customer.objects.filter(email=email).first()

    def exists_by_code(self, code: str, exclude_id: Optional[Any] = None) -> bool:
        queryset = Customer.objects.filter(customer_code=code)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def exists_by_email(self, email: str, exclude_id: Optional[Any] = None) -> bool:
        queryset = Customer.objects.filter(email=email)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, entity: Customer) -> UUID:
        """Insert a new customer and return its ID."""
        entity.save(force_insert=True)
        logger.info("customer.inserted", customer_id=str(entity.id))
        return entity.id

    @transaction.atomic
    def update(self, id: Any, data: Dict[str, Any]) -> bool:
        """Write ``data`` onto the customer, holding a row lock.

        Returns ``False`` if the customer no longer exists.
        """
        try:
            customer = Customer.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return False
        if customer is None:
            return False

        for field, value in data.items():
            setattr(customer, field, value)
        customer.save(update_fields=list(data))
        logger.info(
            "customer.row_updated", customer_id=str(id), fields=sorted(data)
        )
        return True

    @transaction.atomic
    def delete(self, id: Any) -> bool:
        """Physically delete a customer.

        Returns ``True`` if a row was removed, ``False`` otherwise.
        """
        try:
            deleted, _ = self._by_id(id).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info("customer.row_deleted", customer_id=str(id))
        return bool(deleted)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def find_all(self, page_request: PageRequest) -> Tuple[List[Customer], int]:
        """One sorted page of customers plus the total row count.

        ``id`` is appended as a tie-breaker so pages never overlap when the
        sort column has duplicates.
        """
        field = resolve_sort_field(page_request.sort_by)
        prefix = "-" if page_request.descending else ""
        ordering = [f"{prefix}{field}"]
        if field != "id":
            ordering.append(f"{prefix}id")

        queryset = Customer.objects.order_by(*ordering)
        total = queryset.count()
        start = page_request.offset
        if start >= total:
            return [], total
        records = list(queryset[start : start + page_request.size])
        return records, total

    def search(self, keyword: str) -> List[Customer]:
        queryset = Customer.objects.filter(
            Q(full_name__icontains=keyword)
            | Q(email__icontains=keyword)
            | Q(customer_code__icontains=keyword)
        ).order_by("id")
        return list(queryset)

    def list_all(self) -> List[Customer]:
        return list(Customer.objects.order_by("id"))

    def list_by_status(self, status: str) -> List[Customer]:
        return list(Customer.objects.filter(status=status).order_by("id"))
