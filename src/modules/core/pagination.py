"""Pagination value objects shared by list endpoints.

``PageRequest`` normalises raw query parameters (zero-based page number,
page size, sort field and direction).  Out-of-range values are clamped
silently instead of being rejected.  ``Page`` carries one slice of results
plus the metadata clients need to walk the remaining pages.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, List, Mapping, TypeVar

from django.conf import settings

T = TypeVar("T")

DEFAULT_PAGE = 0
DEFAULT_SORT_DIR = "asc"

# Slice bounds are sent to the database as signed 64-bit integers.
MAX_ROW_OFFSET = 2**63 - 1


def _default_page_size() -> int:
    return getattr(settings, "DEFAULT_PAGE_SIZE", 10)


def _max_page_size() -> int:
    return getattr(settings, "MAX_PAGE_SIZE", 100)


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class PageRequest:
    """A normalised page request.

    ``sort_by`` is kept verbatim; each repository resolves it against its
    own allow-list.
    """

    page: int = DEFAULT_PAGE
    size: int = 10
    sort_by: str = "id"
    sort_dir: str = DEFAULT_SORT_DIR

    def __post_init__(self) -> None:
        size = min(max(self.size, 1), _max_page_size())
        last_page = MAX_ROW_OFFSET // size - 1
        object.__setattr__(self, "size", size)
        object.__setattr__(self, "page", min(max(self.page, 0), last_page))
        direction = "desc" if str(self.sort_dir).lower() == "desc" else "asc"
        object.__setattr__(self, "sort_dir", direction)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def descending(self) -> bool:
        return self.sort_dir == "desc"

    @classmethod
    def from_query_params(
        cls, params: Mapping[str, Any], default_sort: str = "id"
    ) -> PageRequest:
        """Build a request from HTTP query parameters.

        Non-numeric ``page`` / ``size`` fall back to the defaults.
        """
        return cls(
            page=_to_int(params.get("page"), DEFAULT_PAGE),
            size=_to_int(params.get("size"), _default_page_size()),
            sort_by=params.get("sort_by") or default_sort,
            sort_dir=params.get("sort_dir") or DEFAULT_SORT_DIR,
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results."""

    items: List[T]
    total_items: int
    request: PageRequest

    @property
    def current_page(self) -> int:
        return self.request.page

    @property
    def total_pages(self) -> int:
        if self.total_items <= 0:
            return 0
        return math.ceil(self.total_items / self.request.size)
