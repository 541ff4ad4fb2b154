"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from rest_framework.test import APIClient


@pytest.fixture
def api_client():
    """
    Unauthenticated DRF API client.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/orders/')
    """
    return APIClient()


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as an admin"""
    return _client_for(admin_user)


@pytest.fixture
def waiter_client(waiter_user):
    """API client authenticated as a waiter"""
    return _client_for(waiter_user)


@pytest.fixture
def cashier_client(cashier_user):
    """API client authenticated as a cashier"""
    return _client_for(cashier_user)


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *  # noqa: E402,F401,F403
