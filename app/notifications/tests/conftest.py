"""
Test configuration and fixtures for notification tests.

This module provides:
- Users in the receiver, sender and staff roles
- Authenticated API clients
- A patched Expo gateway (no network traffic)

Usage:
    def test_example(receiver, device, expo_gateway):
        outcome = PushNotificationService.notify(receiver, "Hi", "There")
        assert expo_gateway.call_count == 1
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from notifications.tests.factories import DeviceTokenFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def receiver(db):
    """User receiving notifications."""
    return UserFactory(email="bob@example.com", name="Bob")


@pytest.fixture
def sender(db):
    return UserFactory(email="alice@example.com", name="Alice")


@pytest.fixture
def staff_user(db):
    return UserFactory(email="staff@example.com", name="Staff", is_staff=True)


@pytest.fixture
def device(receiver):
    """An active iOS device registered by the receiver."""
    return DeviceTokenFactory(user=receiver, token="ExponentPushToken[bob-phone]")


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client_factory(db):
    """Factory to create authenticated clients for any user."""

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def receiver_client(authenticated_client_factory, receiver):
    return authenticated_client_factory(receiver)


@pytest.fixture
def staff_client(authenticated_client_factory, staff_user):
    return authenticated_client_factory(staff_user)


# =============================================================================
# Push Gateway
# =============================================================================


def make_gateway_response(mocker, ticket=None, status_code=200):
    """Build a fake requests.Response carrying one push ticket."""
    response = mocker.Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = {"data": ticket or {"status": "ok", "id": "ticket-1"}}
    return response


@pytest.fixture
def expo_gateway(mocker):
    """
    Patch the HTTP call to the Expo gateway.

    Every push succeeds unless the test changes ``return_value`` or
    ``side_effect``.
    """
    return mocker.patch(
        "notifications.push.requests.post",
        return_value=make_gateway_response(mocker),
    )


@pytest.fixture
def gateway_response(mocker):
    """Builder for fake gateway responses: gateway_response(ticket, status_code)."""

    def _build(ticket=None, status_code=200):
        return make_gateway_response(mocker, ticket=ticket, status_code=status_code)

    return _build
