"""
Tests for staff authentication and the system endpoints.

Tests cover:
- JWT login with valid/invalid credentials
- Token verification
- Bearer token access to protected endpoints
- Health check and unknown API routes
"""

from django.db import DatabaseError

import pytest
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

LOGIN_URL = "/api/auth/login/"
VERIFY_URL = "/api/auth/verify/"


@pytest.mark.django_db
class TestLogin:

    def test_login_success(self, api_client, staff_user):
        response = api_client.post(
            LOGIN_URL, {"username": "cashier", "password": "CashierPass123!"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["token"]
        assert body["refresh"]
        assert body["admin"]["username"] == "cashier"
        assert body["admin"]["id"] == staff_user.id
        staff_user.refresh_from_db()
        assert staff_user.last_login is not None

    def test_wrong_password(self, api_client, staff_user):
        response = api_client.post(LOGIN_URL, {"username": "cashier", "password": "wrong"}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_inactive_user(self, api_client, staff_user):
        staff_user.is_active = False
        staff_user.save()

        response = api_client.post(
            LOGIN_URL, {"username": "cashier", "password": "CashierPass123!"}, format="json"
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_fields(self, api_client):
        response = api_client.post(LOGIN_URL, {"username": "cashier"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_token_grants_access(self, api_client, staff_user):
        token = api_client.post(
            LOGIN_URL, {"username": "cashier", "password": "CashierPass123!"}, format="json"
        ).json()["token"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = api_client.get("/api/orders/")

        assert response.status_code == status.HTTP_200_OK

    def test_garbage_token_is_rejected(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = api_client.get("/api/orders/")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["success"] is False


@pytest.mark.django_db
class TestVerifyAndLogout:

    def test_verify_valid_token(self, api_client, staff_user):
        token = str(AccessToken.for_user(staff_user))

        response = api_client.post(VERIFY_URL, {"token": token}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["admin"] == {"id": staff_user.id, "username": "cashier"}

    def test_verify_invalid_token(self, api_client):
        response = api_client.post(VERIFY_URL, {"token": "not-a-token"}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    def test_verify_token_of_deactivated_user(self, api_client, staff_user):
        token = str(AccessToken.for_user(staff_user))
        staff_user.is_active = False
        staff_user.save()

        response = api_client.post(VERIFY_URL, {"token": token}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout(self, api_client):
        response = api_client.post("/api/auth/logout/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "Logged out successfully"}


@pytest.mark.django_db
class TestSystemEndpoints:

    def test_health(self, api_client):
        response = api_client.get("/api/health/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "ok", "database": "ok"}

    def test_health_database_down(self, api_client, monkeypatch):
        from django.db import connection

        def fail():
            raise DatabaseError("connection refused")

        monkeypatch.setattr(connection, "cursor", fail)

        response = api_client.get("/api/health/")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["success"] is False

    def test_unknown_api_route(self, api_client):
        response = api_client.get("/api/does-not-exist/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "error": {"message": "API not found", "code": "NOT_FOUND"}}
