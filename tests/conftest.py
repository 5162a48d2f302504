import itertools

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.customers.models import Customer, CustomerStatus

_sequence = itertools.count(1)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="testuser", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def make_customer():
    """Factory persisting a Customer with unique code/email unless overridden."""

    def _make(**overrides) -> Customer:
        n = next(_sequence)
        defaults = {
            "customer_code": f"C{n:04d}",
            "full_name": f"Customer {n}",
            "email": f"customer{n}@example.com",
            "status": CustomerStatus.ACTIVE,
        }
        defaults.update(overrides)
        return Customer.objects.create(**defaults)

    return _make
