"""Integration tests for sign-up, sign-in and profiles.

Run with: pytest tests/test_accounts.py -v
"""

import pytest
from rest_framework.test import APIClient

from ticketing.models import Profile, UserRole


def sign_up(client: APIClient, email: str = "ana@example.com", password: str = "s3cret-pass"):
    return client.post(
        "/api/auth/sign-up",
        {"email": email, "password": password, "full_name": "Ana Lima"},
        format="json",
    )


@pytest.mark.django_db
class TestSignUp:
    """Tests for POST /api/auth/sign-up"""

    def test_sign_up_creates_buyer_with_profile(self, api_client: APIClient):
        response = sign_up(api_client)

        assert response.status_code == 201
        assert response.data["token"]
        assert response.data["user"]["email"] == "ana@example.com"
        assert response.data["user"]["roles"] == ["buyer"]
        user_id = response.data["user"]["id"]
        assert Profile.objects.get(user_id=user_id).full_name == "Ana Lima"
        assert list(UserRole.objects.filter(user_id=user_id).values_list("role", flat=True)) == ["buyer"]

    def test_email_is_normalized(self, api_client: APIClient):
        response = sign_up(api_client, email="Ana@Example.com")
        assert response.data["user"]["email"] == "ana@example.com"

    def test_duplicate_email(self, api_client: APIClient):
        sign_up(api_client)
        response = sign_up(api_client, email="ANA@example.com")
        assert response.status_code == 409
        assert response.data["error"]["code"] == "EMAIL_TAKEN"

    def test_short_password(self, api_client: APIClient):
        response = sign_up(api_client, password="123")
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_INPUT"
        assert "password" in response.data["error"]["fields"]


@pytest.mark.django_db
class TestSignIn:
    """Tests for POST /api/auth/sign-in"""

    def test_sign_in_returns_usable_token(self, api_client: APIClient):
        sign_up(api_client)

        response = api_client.post(
            "/api/auth/sign-in", {"email": "ana@example.com", "password": "s3cret-pass"}, format="json"
        )
        assert response.status_code == 200

        api_client.credentials(HTTP_AUTHORIZATION=f"Token {response.data['token']}")
        me = api_client.get("/api/auth/me")

        assert me.status_code == 200
        assert me.data["full_name"] == "Ana Lima"
        assert me.data["permissions"] == []

    def test_wrong_password(self, api_client: APIClient):
        sign_up(api_client)
        response = api_client.post(
            "/api/auth/sign-in", {"email": "ana@example.com", "password": "nope-nope"}, format="json"
        )
        assert response.status_code == 401
        assert response.data["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/me"""

    def test_requires_login(self, api_client: APIClient):
        response = api_client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.data["error"]["code"] == "NOT_AUTHENTICATED"
        assert response.data["error"]["retryable"] is False

    def test_organizer_permissions(self, as_user, organizer):
        response = as_user(organizer).get("/api/auth/me")
        assert "check_in" in response.data["permissions"]
        assert "view_backoffice" in response.data["permissions"]
        assert response.data["is_admin"] is True

    def test_creator_permissions(self, as_user, creator):
        response = as_user(creator).get("/api/auth/me")
        assert response.data["permissions"] == ["manage_own_events"]
        assert response.data["is_admin"] is False

    def test_creator_admin_parity_setting(self, as_user, creator, settings):
        settings.TICKETING = {"CREATOR_IS_ADMIN": True}
        assert as_user(creator).get("/api/auth/me").data["is_admin"] is True


@pytest.mark.django_db
class TestProfile:
    """Tests for GET/PATCH /api/profile"""

    def test_update_profile(self, as_user, buyer):
        client = as_user(buyer)

        response = client.patch("/api/profile", {"phone": "+62 811 000 111"}, format="json")

        assert response.status_code == 200
        assert response.data["phone"] == "+62 811 000 111"
        assert response.data["full_name"] == "Bea Buyer"
        assert client.get("/api/profile").data["phone"] == "+62 811 000 111"
