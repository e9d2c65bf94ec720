"""
Tests for the Authentication API endpoints.
"""
from types import SimpleNamespace

from fastapi.testclient import TestClient

from src.school_admin_backend.services.mail_service import MailService
from tests.constants import (
    TEST_ADMIN_EMAIL,
    TEST_MOTHER_EMAIL,
    TEST_PASSWORD_ADMIN,
    TEST_PASSWORD_PARENT,
    TEST_PARENT_EMAIL,
)


class TestLogin:

    def test_admin_login(self, client: TestClient):
        response = client.post("/auth/login", data={"username": TEST_ADMIN_EMAIL, "password": TEST_PASSWORD_ADMIN})

        assert response.status_code == 200
        token = response.json()
        assert token["token_type"] == "bearer"

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token['access_token']}"})
        assert me.status_code == 200
        assert me.json()["role"] == "admin"
        assert "password" not in me.json()

    def test_parent_login_gives_portal_access(self, client: TestClient):
        token = client.post(
            "/auth/login", data={"username": TEST_PARENT_EMAIL, "password": TEST_PASSWORD_PARENT}
        ).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        assert client.get("/parents", headers=headers).status_code == 200
        assert client.get("/dashboard", headers=headers).status_code == 403

    def test_wrong_password(self, client: TestClient):
        response = client.post("/auth/login", data={"username": TEST_ADMIN_EMAIL, "password": "nope"})
        assert response.status_code == 401

    def test_garbage_token(self, client: TestClient):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestSignUp:

    def test_registered_parent_signs_up_then_confirms(
        self,
        client: TestClient,
        api_school: SimpleNamespace,
        mock_mail_service: MailService
    ):
        response = client.post("/auth/sign-up", json={"email": TEST_MOTHER_EMAIL, "password": "maman-123"})

        assert response.status_code == 201
        user = response.json()
        assert user["role"] == "parent"
        assert user["idparent"] == api_school.parent.idparent
        assert user["is_active"] is False

        credentials = {"username": TEST_MOTHER_EMAIL, "password": "maman-123"}
        assert client.post("/auth/login", data=credentials).status_code == 400

        _, token = mock_mail_service.send_confirmation.await_args.args
        confirmed = client.post("/auth/confirm", json={"token": token})
        assert confirmed.status_code == 200
        assert confirmed.json()["is_active"] is True

        assert client.post("/auth/login", data=credentials).status_code == 200

    def test_forged_confirmation_is_refused(self, client: TestClient):
        response = client.post("/auth/confirm", json={"token": "not-a-jwt"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Lien invalide ou expiré."

    def test_unknown_email_is_refused(self, client: TestClient):
        response = client.post("/auth/sign-up", json={"email": "inconnu@example.com", "password": "secret-123"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Cet e-mail n'est pas associé à un parent enregistré."

    def test_short_password_is_rejected(self, client: TestClient):
        response = client.post("/auth/sign-up", json={"email": TEST_MOTHER_EMAIL, "password": "123"})
        assert response.status_code == 422


class TestPasswordReset:

    def test_forgot_then_update_password(self, client: TestClient, mock_mail_service: MailService):
        response = client.post("/auth/forgot-password", json={"email": TEST_PARENT_EMAIL})

        assert response.status_code == 202
        _, token = mock_mail_service.send_password_reset.await_args.args

        updated = client.post("/auth/update-password", json={"token": token, "password": "nouveau-123"})
        assert updated.status_code == 200
        assert updated.json()["message"] == "Mot de passe mis à jour."

        old = client.post("/auth/login", data={"username": TEST_PARENT_EMAIL, "password": TEST_PASSWORD_PARENT})
        new = client.post("/auth/login", data={"username": TEST_PARENT_EMAIL, "password": "nouveau-123"})
        assert old.status_code == 401
        assert new.status_code == 200

        replay = client.post("/auth/update-password", json={"token": token, "password": "encore-123"})
        assert replay.status_code == 400

    def test_unknown_email_is_not_disclosed(self, client: TestClient, mock_mail_service: MailService):
        known = client.post("/auth/forgot-password", json={"email": TEST_PARENT_EMAIL})
        unknown = client.post("/auth/forgot-password", json={"email": "inconnu@example.com"})

        assert unknown.status_code == 202
        assert unknown.json() == known.json()
        mock_mail_service.send_password_reset.assert_awaited_once()

    def test_confirmation_token_cannot_reset_password(self, client: TestClient, mock_mail_service: MailService):
        client.post("/auth/sign-up", json={"email": TEST_MOTHER_EMAIL, "password": "maman-123"})
        _, token = mock_mail_service.send_confirmation.await_args.args

        response = client.post("/auth/update-password", json={"token": token, "password": "nouveau-123"})

        assert response.status_code == 400
