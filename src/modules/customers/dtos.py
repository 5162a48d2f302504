"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  These are the
contracts between the API layer and the Service layer.  DTOs are immutable
(``frozen=True``).

- ``CustomerRequestDTO``: create / full-update input.  Every field rule
  is checked; ``customer_code``, ``full_name`` and ``email`` are required.
- ``CustomerUpdateDTO``: partial-update input.  Only supplied fields are
  checked; ``None`` means "not supplied".
- ``CustomerResponseDTO``: the externally visible customer.
- ``CustomerPageDTO``: one page of customers plus page metadata.

Request DTOs never carry ``id``, ``created_at`` or ``updated_at``: unknown
keys are ignored, so a client cannot set server-assigned fields.

Every rule raises ``PydanticCustomError`` so the message a client sees is
exactly the one written here, with no Pydantic prefix.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, validate_email
from pydantic_core import PydanticCustomError

if TYPE_CHECKING:
    from modules.core.pagination import Page
    from modules.customers.models import Customer


# ---------------------------------------------------------------------------
# Enum (framework-agnostic, NOT Django TextChoices)
# ---------------------------------------------------------------------------


class CustomerStatusEnum(StrEnum):
    """Lifecycle status of a customer."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------

CUSTOMER_CODE_PATTERN = re.compile(r"^C\d{3,}$")
PHONE_PATTERN = re.compile(r"^\+?\d{10,20}$")

CUSTOMER_CODE_MIN_LENGTH = 3
CUSTOMER_CODE_MAX_LENGTH = 20
FULL_NAME_MIN_LENGTH = 2
FULL_NAME_MAX_LENGTH = 100
ADDRESS_MAX_LENGTH = 500

STATUS_MESSAGE = "Status must be one of: " + ", ".join(
    member.value for member in CustomerStatusEnum
)


def _fail(field: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(f"{field}_invalid", message)


def _require(value: Optional[str], field: str, label: str) -> str:
    if value is None or value == "":
        raise PydanticCustomError(f"{field}_required", f"{label} is required")
    return value


def check_customer_code(value: Optional[str]) -> str:
    value = _require(value, "customer_code", "Customer code")
    if not CUSTOMER_CODE_MIN_LENGTH <= len(value) <= CUSTOMER_CODE_MAX_LENGTH:
        raise _fail(
            "customer_code",
            f"Customer code must be between {CUSTOMER_CODE_MIN_LENGTH} "
            f"and {CUSTOMER_CODE_MAX_LENGTH} characters",
        )
    if not CUSTOMER_CODE_PATTERN.match(value):
        raise _fail(
            "customer_code",
            "Customer code must start with 'C' followed by at least 3 digits",
        )
    return value


def check_full_name(value: Optional[str]) -> str:
    value = _require(value, "full_name", "Full name")
    if not FULL_NAME_MIN_LENGTH <= len(value) <= FULL_NAME_MAX_LENGTH:
        raise _fail(
            "full_name",
            f"Full name must be between {FULL_NAME_MIN_LENGTH} "
            f"and {FULL_NAME_MAX_LENGTH} characters",
        )
    return value


def check_email(value: Optional[str]) -> str:
    value = _require(value, "email", "Email")
    try:
        _, address = validate_email(value)
    except ValueError:
        raise _fail("email", "Email should be valid") from None
    # Display-name form ("Ann <ann@example.com>") parses but is not a bare address.
    if address.lower() != value.lower():
        raise _fail("email", "Email should be valid")
    return value


def check_phone(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if not PHONE_PATTERN.match(value):
        raise _fail(
            "phone",
            "Phone number must be 10-20 digits, optionally starting with '+'",
        )
    return value


def check_address(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if len(value) > ADDRESS_MAX_LENGTH:
        raise _fail(
            "address",
            f"Address must not exceed {ADDRESS_MAX_LENGTH} characters",
        )
    return value


def check_status(value: Any) -> Optional[str]:
    """Accept a ``CustomerStatusEnum`` member or its exact string value."""
    if value is None or value == "":
        return None
    if isinstance(value, str) and value in CustomerStatusEnum._value2member_map_:
        return value
    raise _fail("status", STATUS_MESSAGE)


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CustomerRequestDTO(BaseModel):
    """Immutable DTO for create and full-update requests.

    ``status`` is optional; the service defaults it to ``ACTIVE``.
    Empty ``phone`` / ``address`` are normalised to ``None``.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    customer_code: Optional[str] = Field(default=None, validate_default=True)
    full_name: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[CustomerStatusEnum] = None

    @field_validator("customer_code")
    @classmethod
    def validate_customer_code(cls, v: Optional[str]) -> str:
        return check_customer_code(v)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: Optional[str]) -> str:
        return check_full_name(v)

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v: Optional[str]) -> str:
        return check_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return check_phone(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: Optional[str]) -> Optional[str]:
        return check_address(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Optional[str]:
        return check_status(v)


class CustomerUpdateDTO(BaseModel):
    """Immutable DTO for partial-update requests.

    All fields are optional; only supplied (non-``None``) fields are
    validated and later applied by the service.  An empty ``phone`` or
    ``address`` clears the stored value.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    customer_code: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[CustomerStatusEnum] = None

    @field_validator("customer_code")
    @classmethod
    def validate_customer_code(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_customer_code(v)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_full_name(v)

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return check_phone(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return check_address(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Optional[str]:
        return None if v is None else check_status(v)

    def supplied_fields(self) -> Dict[str, Any]:
        """Fields present in the payload with a non-``None`` value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class CustomerResponseDTO(BaseModel):
    """Immutable DTO for customer API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    customer_code: str
    full_name: str
    email: str
    phone: Optional[str]
    address: Optional[str]
    status: CustomerStatusEnum
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, customer: Customer) -> CustomerResponseDTO:
        """Build an output DTO from a Customer model instance."""
        return cls(
            id=customer.id,
            customer_code=customer.customer_code,
            full_name=customer.full_name,
            email=customer.email,
            phone=customer.phone or None,
            address=customer.address or None,
            status=customer.status,
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )


class CustomerPageDTO(BaseModel):
    """One page of customers with navigation metadata."""

    model_config = ConfigDict(frozen=True)

    customers: List[CustomerResponseDTO]
    current_page: int
    total_items: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page[Customer]) -> CustomerPageDTO:
        return cls(
            customers=[CustomerResponseDTO.from_entity(c) for c in page.items],
            current_page=page.current_page,
            total_items=page.total_items,
            total_pages=page.total_pages,
        )
