"""Customer repository interface.

Extends ``IRepository[Customer]`` with the look-ups the uniqueness rules
need (by code, by email, existence checks that can skip the customer
being updated) and the read models behind the list, search and status
endpoints.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.core.pagination import PageRequest
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[Customer]:
        """Retrieve a customer by exact ``customer_code``."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by exact email address."""

    @abstractmethod
    def exists_by_code(self, code: str, exclude_id: Optional[Any] = None) -> bool:
        """``True`` if another customer holds ``code``."""

    @abstractmethod
    def exists_by_email(self, email: str, exclude_id: Optional[Any] = None) -> bool:
        """``True`` if another customer holds ``email``."""

    @abstractmethod
    def find_all(self, page_request: PageRequest) -> Tuple[List[Customer], int]:
        """Return one sorted page of customers plus the total count."""

    @abstractmethod
    def search(self, keyword: str) -> List[Customer]:
        """Case-insensitive substring match on name, email or code."""

    @abstractmethod
    def list_all(self) -> List[Customer]:
        """Every customer, ordered by ID."""

    @abstractmethod
    def list_by_status(self, status: str) -> List[Customer]:
        """Customers with the given status, ordered by ID."""
