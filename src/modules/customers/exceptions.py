"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one
carries its HTTP status; ``modules.core.exceptions.api_exception_handler``
translates them into error responses in one place.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from rest_framework import status

from modules.core.exceptions import DomainError


class CustomerValidationError(DomainError):
    """One or more request fields are malformed or missing.

    ``field_errors`` maps each offending field to every message it
    produced, in the order the fields are declared on the DTO.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(
        self,
        field_errors: Dict[str, List[str]],
        message: Optional[str] = None,
    ) -> None:
        self._field_errors = field_errors
        super().__init__(message)

    @property
    def field_errors(self) -> Dict[str, List[str]]:
        return self._field_errors


class CustomerAlreadyExists(DomainError):
    """Another customer already holds the given ``customer_code`` or ``email``."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        label = "Customer code" if field == "customer_code" else "Email"
        super().__init__(f"{label} '{value}' already exists.")


class CustomerNotFound(DomainError):
    """The requested customer does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, customer_id: object) -> None:
        self.customer_id = customer_id
        super().__init__(f"Customer not found with id: {customer_id}")
