"""
Tests for the JWT token endpoints.
"""

from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken


class TestTokenObtain:
    """POST /api/v1/auth/token/"""

    def test_returns_token_pair_for_valid_credentials(self, api_client, user):
        response = api_client.post(
            reverse("authentication:token-obtain"),
            {"email": "alice@example.com", "password": "TestPass123!"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
        assert "refresh" in response.data
        assert AccessToken(response.data["access"])["user_id"] == str(user.id)

    def test_rejects_wrong_password(self, api_client, user):
        response = api_client.post(
            reverse("authentication:token-obtain"),
            {"email": "alice@example.com", "password": "wrong"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestTokenRefresh:
    """POST /api/v1/auth/token/refresh/"""

    def test_refresh_issues_new_access_token(self, api_client, user):
        pair = api_client.post(
            reverse("authentication:token-obtain"),
            {"email": "alice@example.com", "password": "TestPass123!"},
            format="json",
        ).data

        response = api_client.post(
            reverse("authentication:token-refresh"),
            {"refresh": pair["refresh"]},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
