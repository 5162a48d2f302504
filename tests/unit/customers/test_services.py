"""Unit tests for CustomerService.

Repository is mocked to isolate business logic.

Covers:
- create_customer: defaults, code-before-email uniqueness, aggregated
  validation errors, unique-index backstop.
- update_customer / partial_update_customer: own code/email allowed,
  only supplied fields written, updated_at refreshed.
- delete_customer: hard delete and NotFound on repeat.
- Queries: get, list (page metadata), search, by status.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone as dt_timezone
from unittest.mock import MagicMock

import pytest
from django.db import IntegrityError
from freezegun import freeze_time

from modules.core.pagination import PageRequest
from modules.customers.dtos import CustomerResponseDTO, CustomerStatusEnum
from modules.customers.exceptions import (
    CustomerAlreadyExists,
    CustomerNotFound,
    CustomerValidationError,
)
from modules.customers.models import Customer, CustomerStatus
from modules.customers.repositories.interfaces import ICustomerRepository
from modules.customers.services import CustomerService

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "customer_code": "C123",
        "full_name": "Ada Lovelace",
        "email": "ada@example.com",
    }
    data.update(overrides)
    return data


def _customer(**overrides) -> Customer:
    fields = {
        "customer_code": "C123",
        "full_name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "1234567890",
        "address": "London",
        "status": CustomerStatus.ACTIVE,
        "created_at": datetime(2026, 1, 1, tzinfo=dt_timezone.utc),
        "updated_at": datetime(2026, 1, 1, tzinfo=dt_timezone.utc),
    }
    fields.update(overrides)
    return Customer(**fields)


@pytest.fixture()
def repo():
    mock = MagicMock(spec=ICustomerRepository)
    mock.exists_by_code.return_value = False
    mock.exists_by_email.return_value = False
    mock.update.return_value = True
    mock.delete.return_value = True
    return mock


@pytest.fixture()
def service(repo) -> CustomerService:
    return CustomerService(repository=repo)


# ===========================================================================
# create_customer
# ===========================================================================


class TestCreateCustomer:
    def test_returns_response_dto(self, service, repo):
        result = service.create_customer(_payload())

        assert isinstance(result, CustomerResponseDTO)
        assert result.customer_code == "C123"
        assert result.id is not None
        repo.create.assert_called_once()

    def test_status_defaults_to_active(self, service):
        result = service.create_customer(_payload())
        assert result.status == CustomerStatusEnum.ACTIVE

    def test_explicit_status_is_kept(self, service):
        result = service.create_customer(_payload(status="INACTIVE"))
        assert result.status == CustomerStatusEnum.INACTIVE

    def test_timestamps_are_equal_on_create(self, service):
        result = service.create_customer(_payload())
        assert result.created_at == result.updated_at

    def test_missing_optionals_stored_as_empty(self, service, repo):
        service.create_customer(_payload())
        stored = repo.create.call_args[0][0]
        assert stored.phone == ""
        assert stored.address == ""

    def test_client_supplied_id_is_ignored(self, service, repo):
        forged = str(uuid.uuid4())
        result = service.create_customer(_payload(id=forged))
        assert str(result.id) != forged

    def test_duplicate_code_checked_before_email(self, service, repo):
        repo.exists_by_code.return_value = True
        repo.exists_by_email.return_value = True

        with pytest.raises(CustomerAlreadyExists) as excinfo:
            service.create_customer(_payload())

        assert excinfo.value.field == "customer_code"
        assert excinfo.value.message == "Customer code 'C123' already exists."
        repo.exists_by_email.assert_not_called()
        repo.create.assert_not_called()

    def test_duplicate_email(self, service, repo):
        repo.exists_by_email.return_value = True

        with pytest.raises(CustomerAlreadyExists) as excinfo:
            service.create_customer(_payload())

        assert excinfo.value.field == "email"
        assert excinfo.value.message == "Email 'ada@example.com' already exists."
        repo.create.assert_not_called()

    def test_validation_errors_aggregated_before_store_access(self, service, repo):
        with pytest.raises(CustomerValidationError) as excinfo:
            service.create_customer(
                {"customer_code": "C1", "full_name": "", "email": "bad"}
            )

        assert set(excinfo.value.field_errors) == {
            "customer_code",
            "full_name",
            "email",
        }
        repo.exists_by_code.assert_not_called()
        repo.create.assert_not_called()

    def test_integrity_error_becomes_conflict(self, service, repo):
        # Pre-check passes, a concurrent writer wins, then the re-check sees it.
        repo.exists_by_code.side_effect = [False, True]
        repo.create.side_effect = IntegrityError("UNIQUE constraint failed")

        with pytest.raises(CustomerAlreadyExists) as excinfo:
            service.create_customer(_payload())

        assert excinfo.value.field == "customer_code"

    def test_integrity_error_on_email(self, service, repo):
        repo.exists_by_email.side_effect = [False, True]
        repo.create.side_effect = IntegrityError("UNIQUE constraint failed")

        with pytest.raises(CustomerAlreadyExists) as excinfo:
            service.create_customer(_payload())

        assert excinfo.value.field == "email"


# ===========================================================================
# update_customer
# ===========================================================================


class TestUpdateCustomer:
    def test_not_found(self, service, repo):
        repo.get_by_id.return_value = None
        with pytest.raises(CustomerNotFound):
            service.update_customer(uuid.uuid4(), _payload())
        repo.update.assert_not_called()

    def test_keeping_own_code_and_email_is_allowed(self, service, repo):
        customer = _customer()
        repo.get_by_id.return_value = customer

        service.update_customer(customer.id, _payload(full_name="Ada King"))

        repo.exists_by_code.assert_called_once_with("C123", exclude_id=customer.id)
        repo.exists_by_email.assert_called_once_with(
            "ada@example.com", exclude_id=customer.id
        )

    def test_replaces_all_fields(self, service, repo):
        customer = _customer()
        repo.get_by_id.return_value = customer

        result = service.update_customer(
            customer.id,
            _payload(customer_code="C456", full_name="Ada King", status="INACTIVE"),
        )

        assert result.customer_code == "C456"
        assert result.full_name == "Ada King"
        assert result.status == CustomerStatusEnum.INACTIVE
        # Optionals missing from a full update are cleared.
        assert result.phone is None
        assert result.address is None
        changes = repo.update.call_args[0][1]
        assert changes["phone"] == ""
        assert changes["address"] == ""

    def test_code_taken_by_another_customer(self, service, repo):
        repo.get_by_id.return_value = _customer()
        repo.exists_by_code.return_value = True

        with pytest.raises(CustomerAlreadyExists):
            service.update_customer(uuid.uuid4(), _payload(customer_code="C999"))
        repo.update.assert_not_called()

    def test_invalid_payload(self, service, repo):
        repo.get_by_id.return_value = _customer()
        with pytest.raises(CustomerValidationError):
            service.update_customer(uuid.uuid4(), _payload(email="nope"))
        repo.update.assert_not_called()

    def test_row_vanished_during_update(self, service, repo):
        repo.get_by_id.return_value = _customer()
        repo.update.return_value = False
        with pytest.raises(CustomerNotFound):
            service.update_customer(uuid.uuid4(), _payload())

    def test_created_at_is_preserved(self, service, repo):
        customer = _customer()
        repo.get_by_id.return_value = customer
        result = service.update_customer(customer.id, _payload())
        assert result.created_at == datetime(2026, 1, 1, tzinfo=dt_timezone.utc)
        assert "created_at" not in repo.update.call_args[0][1]


# ===========================================================================
# partial_update_customer
# ===========================================================================


class TestPartialUpdateCustomer:
    def test_only_supplied_field_changes(self, service, repo):
        customer = _customer()
        repo.get_by_id.return_value = customer

        with freeze_time("2026-03-01 12:00:00"):
            result = service.partial_update_customer(
                customer.id, {"phone": "+5511987654321"}
            )

        changes = repo.update.call_args[0][1]
        assert set(changes) == {"phone", "updated_at"}
        assert result.phone == "+5511987654321"
        assert result.full_name == "Ada Lovelace"
        assert result.email == "ada@example.com"
        assert result.updated_at == datetime(2026, 3, 1, 12, tzinfo=dt_timezone.utc)

    def test_updated_at_never_moves_backwards(self, service, repo):
        future = datetime(2030, 1, 1, tzinfo=dt_timezone.utc)
        customer = _customer(updated_at=future)
        repo.get_by_id.return_value = customer

        with freeze_time("2026-03-01 12:00:00"):
            result = service.partial_update_customer(customer.id, {"full_name": "X Y"})

        assert result.updated_at == future

    def test_uniqueness_checked_only_for_supplied_fields(self, service, repo):
        repo.get_by_id.return_value = _customer()
        service.partial_update_customer(uuid.uuid4(), {"full_name": "Ada King"})
        repo.exists_by_code.assert_not_called()
        repo.exists_by_email.assert_not_called()

    def test_supplied_email_conflict(self, service, repo):
        repo.get_by_id.return_value = _customer()
        repo.exists_by_email.return_value = True

        with pytest.raises(CustomerAlreadyExists) as excinfo:
            service.partial_update_customer(
                uuid.uuid4(), {"email": "taken@example.com"}
            )
        assert excinfo.value.field == "email"

    def test_empty_phone_clears_value(self, service, repo):
        customer = _customer()
        repo.get_by_id.return_value = customer
        result = service.partial_update_customer(customer.id, {"phone": ""})
        assert result.phone is None
        assert repo.update.call_args[0][1]["phone"] == ""

    def test_invalid_supplied_field(self, service, repo):
        repo.get_by_id.return_value = _customer()
        with pytest.raises(CustomerValidationError) as excinfo:
            service.partial_update_customer(uuid.uuid4(), {"status": "GONE"})
        assert list(excinfo.value.field_errors) == ["status"]

    def test_integrity_error_becomes_conflict(self, service, repo):
        customer = _customer()
        repo.get_by_id.return_value = customer
        repo.exists_by_code.side_effect = [False, True]
        repo.update.side_effect = IntegrityError("UNIQUE constraint failed")

        with pytest.raises(CustomerAlreadyExists) as excinfo:
            service.partial_update_customer(customer.id, {"customer_code": "C999"})
        assert excinfo.value.value == "C999"


# ===========================================================================
# delete_customer
# ===========================================================================


class TestDeleteCustomer:
    def test_deletes_existing(self, service, repo):
        customer = _customer()
        repo.get_by_id.return_value = customer
        service.delete_customer(customer.id)
        repo.delete.assert_called_once_with(customer.id)

    def test_not_found(self, service, repo):
        repo.get_by_id.return_value = None
        with pytest.raises(CustomerNotFound) as excinfo:
            service.delete_customer("missing")
        assert excinfo.value.message == "Customer not found with id: missing"
        repo.delete.assert_not_called()

    def test_lost_race_with_another_delete(self, service, repo):
        repo.get_by_id.return_value = _customer()
        repo.delete.return_value = False
        with pytest.raises(CustomerNotFound):
            service.delete_customer(uuid.uuid4())


# ===========================================================================
# Queries
# ===========================================================================


class TestGetCustomer:
    def test_found(self, service, repo):
        customer = _customer()
        repo.get_by_id.return_value = customer
        assert service.get_customer(customer.id).id == customer.id

    def test_not_found(self, service, repo):
        repo.get_by_id.return_value = None
        with pytest.raises(CustomerNotFound):
            service.get_customer(uuid.uuid4())


class TestListCustomers:
    def test_page_metadata(self, service, repo):
        records = [_customer(customer_code=f"C10{i}") for i in range(5)]
        repo.find_all.return_value = (records, 25)
        request = PageRequest(page=2, size=10)

        page = service.list_customers(request)

        repo.find_all.assert_called_once_with(request)
        assert len(page.customers) == 5
        assert page.current_page == 2
        assert page.total_items == 25
        assert page.total_pages == 3

    def test_empty_store(self, service, repo):
        repo.find_all.return_value = ([], 0)
        page = service.list_customers(PageRequest())
        assert page.customers == []
        assert page.total_pages == 0


class TestSearchCustomers:
    @pytest.mark.parametrize("keyword", [None, "", "   "])
    def test_blank_keyword_lists_everyone(self, service, repo, keyword):
        repo.list_all.return_value = [_customer()]
        result = service.search_customers(keyword)
        assert len(result) == 1
        repo.list_all.assert_called_once()
        repo.search.assert_not_called()

    def test_keyword_is_trimmed(self, service, repo):
        repo.search.return_value = []
        assert service.search_customers("  ada ") == []
        repo.search.assert_called_once_with("ada")


class TestGetCustomersByStatus:
    def test_valid_status(self, service, repo):
        repo.list_by_status.return_value = [_customer(status=CustomerStatus.INACTIVE)]
        result = service.get_customers_by_status("INACTIVE")
        repo.list_by_status.assert_called_once_with("INACTIVE")
        assert result[0].status == CustomerStatusEnum.INACTIVE

    @pytest.mark.parametrize("status", ["DELETED", "active", ""])
    def test_invalid_status(self, service, repo, status):
        with pytest.raises(CustomerValidationError) as excinfo:
            service.get_customers_by_status(status)
        assert excinfo.value.field_errors == {
            "status": ["Status must be one of: ACTIVE, INACTIVE"]
        }
        repo.list_by_status.assert_not_called()
