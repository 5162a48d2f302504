"""Request validation for the Customer resource.

Checks shape and format only; uniqueness needs the store and is left to
``CustomerService``.  Every function either returns a validated DTO or
raises ``CustomerValidationError`` with **all** violations found, grouped
per field in declaration order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from django.http import QueryDict
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from modules.customers.dtos import (
    STATUS_MESSAGE,
    CustomerRequestDTO,
    CustomerStatusEnum,
    CustomerUpdateDTO,
)
from modules.customers.exceptions import CustomerValidationError

DTO = TypeVar("DTO", bound=BaseModel)


def field_errors_from(
    exc: PydanticValidationError, dto_cls: Type[BaseModel]
) -> Dict[str, List[str]]:
    """Group Pydantic errors as ``{field: [messages]}``.

    Fields come out in the order they are declared on ``dto_cls``; errors
    not tied to a field land under ``non_field_errors``.
    """
    grouped: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "non_field_errors"
        grouped.setdefault(field, []).append(error["msg"])

    order = {name: index for index, name in enumerate(dto_cls.model_fields)}
    return dict(
        sorted(grouped.items(), key=lambda item: order.get(item[0], len(order)))
    )


def _parse(dto_cls: Type[DTO], payload: Optional[Mapping[str, Any]]) -> DTO:
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise CustomerValidationError(
            {"non_field_errors": ["Request body must be a JSON object"]}
        )
    try:
        data = payload.dict() if isinstance(payload, QueryDict) else dict(payload)
        return dto_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise CustomerValidationError(field_errors_from(exc, dto_cls)) from exc


def validate_create(payload: Optional[Mapping[str, Any]]) -> CustomerRequestDTO:
    """Validate a create or full-update payload."""
    return _parse(CustomerRequestDTO, payload)


def validate_partial(payload: Optional[Mapping[str, Any]]) -> CustomerUpdateDTO:
    """Validate a partial-update payload; absent fields are not errors."""
    return _parse(CustomerUpdateDTO, payload)


def validate_status(value: Any) -> CustomerStatusEnum:
    """Resolve a status path/query value, rejecting unknown values."""
    try:
        return CustomerStatusEnum(value)
    except ValueError:
        raise CustomerValidationError(
            {"status": [STATUS_MESSAGE]}, message=f"Invalid status: {value}"
        ) from None
