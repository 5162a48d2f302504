"""Unit tests for the ``seed_data`` management command."""

from __future__ import annotations

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from modules.core.management.commands.seed_data import SEED_CUSTOMERS
from modules.customers.models import Customer, CustomerStatus

pytestmark = pytest.mark.unit


def _run() -> str:
    out = StringIO()
    call_command("seed_data", stdout=out)
    return out.getvalue()


class TestSeedData:
    def test_creates_users_and_customers(self):
        output = _run()

        assert Customer.objects.count() == len(SEED_CUSTOMERS)
        assert get_user_model().objects.filter(username="admin").exists()
        assert f"customers={len(SEED_CUSTOMERS)}" in output

    def test_seeded_values(self):
        _run()
        carla = Customer.objects.get(customer_code="C003")
        assert carla.status == CustomerStatus.INACTIVE
        assert carla.phone == ""
        assert carla.address == "99 Elm Ave"

    def test_is_idempotent(self):
        _run()
        output = _run()
        assert Customer.objects.count() == len(SEED_CUSTOMERS)
        assert "users=0, customers=0" in output
