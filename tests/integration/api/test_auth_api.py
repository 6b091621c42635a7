"""
Integration tests for the auth API.
"""

import re

import pytest
from django.core import mail

from tests.conftest import STRONG_PASSWORD

TOKEN_IN_LINK = re.compile(r"token=([\w-]+)")


def _last_mailed_token() -> str:
    return TOKEN_IN_LINK.search(mail.outbox[-1].body).group(1)


@pytest.mark.django_db
@pytest.mark.integration
class TestRegistrationFlow:
    """Register, confirm, resend."""

    def test_register_confirm_and_use_session(self, api_client):
        response = api_client.post(
            "/api/v1/auth/register",
            {"email": "New.User@Example.com", "password": STRONG_PASSWORD},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["email"] == "new.user@example.com"
        assert response.data["email_confirmed"] is False
        assert "token" not in response.data
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["new.user@example.com"]
        assert "http://frontend.test/confirm-email?token=" in mail.outbox[0].body

        response = api_client.post("/api/v1/auth/confirm-email", {"token": _last_mailed_token()}, format="json")

        assert response.status_code == 200
        assert response.data["user"]["email_confirmed"] is True
        assert response.data["user"]["roles"] == ["user"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['token']}")
        me = api_client.get("/api/v1/auth/me")
        assert me.status_code == 200
        assert me.data["email"] == "new.user@example.com"
        assert me.data["display_name"] == "new.user"

    def test_register_duplicate_email(self, api_client, create_account):
        create_account(email="alice@example.com")

        response = api_client.post(
            "/api/v1/auth/register",
            {"email": "ALICE@example.com", "password": STRONG_PASSWORD},
            format="json",
        )

        assert response.status_code == 409
        assert response.data["error"]["code"] == "DUPLICATE_EMAIL"

    def test_register_weak_password(self, api_client):
        response = api_client.post(
            "/api/v1/auth/register", {"email": "bob@example.com", "password": "123"}, format="json"
        )

        assert response.status_code == 400
        assert "password" in response.data["error"]

    def test_register_invalid_email(self, api_client):
        response = api_client.post(
            "/api/v1/auth/register", {"email": "not-an-email", "password": STRONG_PASSWORD}, format="json"
        )

        assert response.status_code == 400
        assert "email" in response.data["error"]

    def test_confirm_token_twice(self, api_client):
        api_client.post("/api/v1/auth/register", {"email": "bob@example.com", "password": STRONG_PASSWORD}, format="json")
        token = _last_mailed_token()

        assert api_client.post("/api/v1/auth/confirm-email", {"token": token}, format="json").status_code == 200
        response = api_client.post("/api/v1/auth/confirm-email", {"token": token}, format="json")

        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_OR_EXPIRED_TOKEN"

    def test_resend_confirmation(self, api_client, create_account):
        create_account(email="carol@example.com", confirmed=False)

        response = api_client.post("/api/v1/auth/resend-confirmation", {"email": "carol@example.com"}, format="json")

        assert response.status_code == 200
        assert response.data["message"] == "Confirmation email sent"
        assert len(mail.outbox) == 1

    def test_resend_for_confirmed_account(self, api_client, create_account):
        create_account(email="carol@example.com")

        response = api_client.post("/api/v1/auth/resend-confirmation", {"email": "carol@example.com"}, format="json")

        assert response.status_code == 409
        assert response.data["error"]["code"] == "ALREADY_CONFIRMED"

    def test_resend_for_unknown_email(self, api_client):
        response = api_client.post("/api/v1/auth/resend-confirmation", {"email": "ghost@example.com"}, format="json")
        assert response.status_code == 404


@pytest.mark.django_db
@pytest.mark.integration
class TestLogin:
    """Login and the session guard."""

    def test_login_success(self, api_client, create_account):
        user = create_account()

        response = api_client.post(
            "/api/v1/auth/login", {"email": "Alice@Example.com", "password": STRONG_PASSWORD}, format="json"
        )

        assert response.status_code == 200
        assert response.data["user"]["id"] == str(user.id)
        assert response.data["token"]

    def test_wrong_password_and_unknown_email_look_the_same(self, api_client, create_account):
        create_account()

        wrong = api_client.post("/api/v1/auth/login", {"email": "alice@example.com", "password": "nope-nope"}, format="json")
        unknown = api_client.post("/api/v1/auth/login", {"email": "ghost@example.com", "password": "nope-nope"}, format="json")

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.data == unknown.data
        assert wrong["WWW-Authenticate"] == "Bearer"

    def test_unconfirmed_login(self, api_client, create_account):
        create_account(confirmed=False)

        response = api_client.post(
            "/api/v1/auth/login", {"email": "alice@example.com", "password": STRONG_PASSWORD}, format="json"
        )

        assert response.status_code == 403
        assert response.data["error"]["code"] == "EMAIL_NOT_CONFIRMED"

    def test_me_requires_token(self, api_client):
        response = api_client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.data["error"]["code"] == "UNAUTHENTICATED"

    def test_me_with_forged_token(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer forged.token.value")
        assert api_client.get("/api/v1/auth/me").status_code == 401

    def test_token_of_deleted_user(self, api_client, create_account, authenticate):
        user = create_account()
        authenticate(user)
        user.delete()

        response = api_client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.data["error"]["code"] == "USER_NOT_FOUND"

    def test_logout_is_stateless(self, api_client, create_account, authenticate):
        authenticate(create_account())

        response = api_client.post("/api/v1/auth/logout")

        assert response.status_code == 200
        assert response.data["message"] == "Logged out"
        assert api_client.get("/api/v1/auth/me").status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
class TestPasswords:
    """Forgot, reset and change password."""

    def test_forgot_password_is_generic(self, api_client, create_account):
        create_account()

        known = api_client.post("/api/v1/auth/forgot-password", {"email": "alice@example.com"}, format="json")
        unknown = api_client.post("/api/v1/auth/forgot-password", {"email": "ghost@example.com"}, format="json")

        assert known.status_code == unknown.status_code == 200
        assert known.data == unknown.data
        assert len(mail.outbox) == 1

    def test_reset_password_flow(self, api_client, create_account):
        create_account()
        api_client.post("/api/v1/auth/forgot-password", {"email": "alice@example.com"}, format="json")
        assert "http://frontend.test/reset-password?token=" in mail.outbox[-1].body

        response = api_client.post(
            "/api/v1/auth/reset-password",
            {"token": _last_mailed_token(), "new_password": "An0ther-Secret-Pass"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["token"]
        old = api_client.post("/api/v1/auth/login", {"email": "alice@example.com", "password": STRONG_PASSWORD}, format="json")
        new = api_client.post(
            "/api/v1/auth/login", {"email": "alice@example.com", "password": "An0ther-Secret-Pass"}, format="json"
        )
        assert old.status_code == 401
        assert new.status_code == 200

    def test_reset_with_bad_token(self, api_client):
        response = api_client.post(
            "/api/v1/auth/reset-password", {"token": "bogus", "new_password": "An0ther-Secret-Pass"}, format="json"
        )
        assert response.status_code == 400

    def test_change_password(self, api_client, create_account, authenticate):
        authenticate(create_account())

        wrong = api_client.post(
            "/api/v1/auth/change-password",
            {"current_password": "wrong-one", "new_password": "An0ther-Secret-Pass"},
            format="json",
        )
        right = api_client.post(
            "/api/v1/auth/change-password",
            {"current_password": STRONG_PASSWORD, "new_password": "An0ther-Secret-Pass"},
            format="json",
        )

        assert wrong.status_code == 401
        assert right.status_code == 200
        assert right.data["message"] == "Password updated"
