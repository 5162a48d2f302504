"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected ``ICustomerRepository``.

Business rules enforced here:
- Request fields are validated before any store access.
- ``customer_code`` must be unique, checked before ``email``.
- ``email`` must be unique.
- A customer may keep its own code/email on update.
- ``status`` defaults to ``ACTIVE``.
- ``created_at`` is set once; ``updated_at`` is refreshed on every write.

Uniqueness is pre-checked for a deterministic error, and the database's
unique indexes catch the race where a concurrent writer commits between
the check and the write.  Such an ``IntegrityError`` is converted into the
same ``CustomerAlreadyExists`` the pre-check would have raised.

The service never hands ORM instances to its callers: every result is a
``CustomerResponseDTO`` (or a page/list of them).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from modules.core.pagination import Page, PageRequest
from modules.customers.dtos import (
    CustomerPageDTO,
    CustomerResponseDTO,
    CustomerStatusEnum,
)
from modules.customers.exceptions import CustomerAlreadyExists, CustomerNotFound
from modules.customers.models import Customer
from modules.customers.validators import (
    validate_create,
    validate_partial,
    validate_status,
)

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)

MUTABLE_FIELDS = ("customer_code", "full_name", "email", "phone", "address", "status")


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, id: Any) -> Customer:
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(id)
        return customer

    def _ensure_unique(
        self,
        code: Optional[str],
        email: Optional[str],
        exclude_id: Optional[Any] = None,
    ) -> None:
        """Raise ``CustomerAlreadyExists`` for the first taken value, code first."""
        log = logger.bind(customer_id=str(exclude_id) if exclude_id else None)
        if code is not None and self._repo.exists_by_code(code, exclude_id=exclude_id):
            log.warning("customer.duplicate_code", customer_code=code)
            raise CustomerAlreadyExists("customer_code", code)
        if email is not None and self._repo.exists_by_email(
            email, exclude_id=exclude_id
        ):
            log.warning("customer.duplicate_email", email=email)
            raise CustomerAlreadyExists("email", email)

    def _conflict_from_integrity_error(
        self,
        exc: IntegrityError,
        code: Optional[str],
        email: Optional[str],
        exclude_id: Optional[Any] = None,
    ) -> CustomerAlreadyExists:
        """Work out which unique value lost a race, re-reading the store."""
        logger.warning("customer.unique_violation", error=str(exc))
        try:
            self._ensure_unique(code, email, exclude_id=exclude_id)
        except CustomerAlreadyExists as conflict:
            return conflict
        # The conflicting row vanished again; report on the most likely field.
        if code is not None:
            return CustomerAlreadyExists("customer_code", code)
        return CustomerAlreadyExists("email", email or "")

    @staticmethod
    def _next_updated_at(customer: Customer) -> datetime:
        now = timezone.now()
        if customer.updated_at is not None and customer.updated_at > now:
            return customer.updated_at
        return now

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(self, payload: Mapping[str, Any]) -> CustomerResponseDTO:
        """Validate and persist a new customer.

        Raises:
            CustomerValidationError: if any field is malformed or missing.
            CustomerAlreadyExists: if the code (checked first) or the email
                is already taken.
        """
        dto = validate_create(payload)
        self._ensure_unique(dto.customer_code, dto.email)

        now = timezone.now()
        customer = Customer(
            customer_code=dto.customer_code,
            full_name=dto.full_name,
            email=dto.email,
            phone=dto.phone or "",
            address=dto.address or "",
            status=dto.status or CustomerStatusEnum.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        try:
            self._repo.create(customer)
        except IntegrityError as exc:
            raise self._conflict_from_integrity_error(
                exc, dto.customer_code, dto.email
            ) from exc

        logger.info(
            "customer.created",
            customer_id=str(customer.id),
            customer_code=customer.customer_code,
        )
        return CustomerResponseDTO.from_entity(customer)

    @transaction.atomic
    def update_customer(
        self, id: Any, payload: Mapping[str, Any]
    ) -> CustomerResponseDTO:
        """Replace every mutable field of an existing customer.

        Optional fields missing from the payload are cleared and a missing
        ``status`` resets to ``ACTIVE``.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerValidationError: if any field is malformed or missing.
            CustomerAlreadyExists: if the code or email belongs to
                another customer.
        """
        customer = self._get_or_raise(id)
        dto = validate_create(payload)
        self._ensure_unique(dto.customer_code, dto.email, exclude_id=customer.id)

        changes: Dict[str, Any] = {
            "customer_code": dto.customer_code,
            "full_name": dto.full_name,
            "email": dto.email,
            "phone": dto.phone or "",
            "address": dto.address or "",
            "status": dto.status or CustomerStatusEnum.ACTIVE,
        }
        return self._apply(customer, changes)

    @transaction.atomic
    def partial_update_customer(
        self, id: Any, payload: Mapping[str, Any]
    ) -> CustomerResponseDTO:
        """Apply only the fields present in ``payload``.

        Fields that are absent (or ``null``) keep their stored value.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerValidationError: if a supplied field is malformed.
            CustomerAlreadyExists: if a supplied code or email belongs to
                another customer.
        """
        customer = self._get_or_raise(id)
        dto = validate_partial(payload)
        changes = dto.supplied_fields()
        self._ensure_unique(
            changes.get("customer_code"), changes.get("email"), exclude_id=customer.id
        )
        return self._apply(customer, changes)

    def _apply(self, customer: Customer, changes: Dict[str, Any]) -> CustomerResponseDTO:
        changes = {k: v for k, v in changes.items() if k in MUTABLE_FIELDS}
        changes["updated_at"] = self._next_updated_at(customer)

        try:
            updated = self._repo.update(customer.id, changes)
        except IntegrityError as exc:
            raise self._conflict_from_integrity_error(
                exc,
                changes.get("customer_code"),
                changes.get("email"),
                exclude_id=customer.id,
            ) from exc
        if not updated:
            raise CustomerNotFound(customer.id)

        for field, value in changes.items():
            setattr(customer, field, value)
        logger.info(
            "customer.updated",
            customer_id=str(customer.id),
            fields=sorted(k for k in changes if k != "updated_at"),
        )
        return CustomerResponseDTO.from_entity(customer)

    @transaction.atomic
    def delete_customer(self, id: Any) -> None:
        """Permanently delete a customer.

        Raises:
            CustomerNotFound: if the customer does not exist (including a
                second delete of the same ID).
        """
        customer = self._get_or_raise(id)
        if not self._repo.delete(customer.id):
            raise CustomerNotFound(id)
        logger.info("customer.deleted", customer_id=str(customer.id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_customer(self, id: Any) -> CustomerResponseDTO:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        customer = self._get_or_raise(id)
        logger.info("customer.retrieved", customer_id=str(customer.id))
        return CustomerResponseDTO.from_entity(customer)

    def list_customers(self, page_request: PageRequest) -> CustomerPageDTO:
        """Return one page of customers with page metadata."""
        records, total = self._repo.find_all(page_request)
        return CustomerPageDTO.from_page(
            Page(items=records, total_items=total, request=page_request)
        )

    def search_customers(self, keyword: Optional[str]) -> List[CustomerResponseDTO]:
        """Substring search over name, email and code.

        A blank keyword matches every customer.  No match is an empty list.
        """
        keyword = (keyword or "").strip()
        if keyword:
            records = self._repo.search(keyword)
        else:
            records = self._repo.list_all()
        logger.info("customer.searched", keyword=keyword, matches=len(records))
        return [CustomerResponseDTO.from_entity(c) for c in records]

    def get_customers_by_status(self, status: Any) -> List[CustomerResponseDTO]:
        """List customers with the given status.

        Raises:
            CustomerValidationError: if ``status`` is not a known value.
        """
        resolved = validate_status(status)
        records = self._repo.list_by_status(resolved.value)
        return [CustomerResponseDTO.from_entity(c) for c in records]
