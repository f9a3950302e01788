import pytest
from sqlmodel import Session

from conftest import TEST_PASSWORD
from config import settings
from models import Colaborador
from routers.auth import (
    create_session_token,
    hash_password,
    verify_password,
    verify_session_token,
)


class TestPasswordHashing:

    def test_hash_is_bcrypt(self):
        hashed = hash_password("testpassword123")

        assert hashed != "testpassword123"
        assert hashed.startswith("$2b$")

    def test_configured_work_factor(self):
        hashed = hash_password("testpassword123", rounds=12)

        assert hashed.startswith("$2b$12$")

    def test_verify_correct_and_incorrect(self):
        hashed = hash_password("testpassword123")

        assert verify_password("testpassword123", hashed) is True
        assert verify_password("wrongpassword", hashed) is False

    def test_same_password_gets_different_salts(self):
        assert hash_password("abc") != hash_password("abc")

    def test_long_password_truncated(self):
        long_password = "a" * 100
        hashed = hash_password(long_password)

        assert verify_password(long_password, hashed) is True

    def test_malformed_hash_is_a_mismatch(self):
        assert verify_password("x", "not-a-bcrypt-hash") is False


class TestSessionToken:

    def test_round_trip(self):
        token = create_session_token(7)

        assert verify_session_token(token) == {"colaborador_id": 7}

    def test_tampered_token(self):
        token = create_session_token(7)

        assert verify_session_token("x" + token[1:]) is None

    def test_expired_token(self):
        token = create_session_token(7)

        assert verify_session_token(token, max_age_seconds=-1) is None

    def test_garbage(self):
        assert verify_session_token("garbage") is None


class TestLogin:

    def test_login_success(self, client, colaborador: Colaborador):
        response = client.post(
            "/api/auth/login",
            json={"email": colaborador.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["id"] == colaborador.id
        assert data["nome"] == colaborador.nome
        assert data["email"] == colaborador.email
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == settings.SESSION_MAX_AGE_SECONDS
        assert verify_session_token(data["access_token"]) == {"colaborador_id": colaborador.id}

    def test_hash_never_returned(self, client, colaborador: Colaborador):
        response = client.post(
            "/api/auth/login",
            json={"email": colaborador.email, "password": TEST_PASSWORD},
        )

        assert "password_hash" not in response.text
        assert colaborador.password_hash not in response.text

    def test_unknown_email_and_wrong_password_look_the_same(self, client, colaborador: Colaborador):
        unknown = client.post(
            "/api/auth/login",
            json={"email": "ninguem@ipca.pt", "password": TEST_PASSWORD},
        )
        wrong = client.post(
            "/api/auth/login",
            json={"email": colaborador.email, "password": "wrongpassword"},
        )

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()
        assert unknown.json() == {"success": False, "message": "Credenciais inválidas"}

    @pytest.mark.parametrize("payload", [
        {},
        {"email": "a@b.pt"},
        {"password": "x"},
        {"email": "", "password": ""},
    ])
    def test_missing_fields(self, client, payload):
        response = client.post("/api/auth/login", json=payload)

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestCurrentColaborador:

    def test_me(self, client, colaborador: Colaborador, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "id": colaborador.id,
            "nome": colaborador.nome,
            "email": colaborador.email,
        }

    def test_login_token_grants_access(self, client, colaborador: Colaborador):
        token = client.post(
            "/api/auth/login",
            json={"email": colaborador.email, "password": TEST_PASSWORD},
        ).json()["data"]["access_token"]

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200

    def test_no_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_wrong_scheme(self, client, colaborador: Colaborador):
        token = create_session_token(colaborador.id)

        response = client.get("/api/auth/me", headers={"Authorization": f"Basic {token}"})

        assert response.status_code == 401

    def test_tampered_token(self, client, auth_headers):
        headers = {"Authorization": auth_headers["Authorization"] + "x"}

        response = client.get("/api/auth/me", headers=headers)

        assert response.status_code == 401

    def test_expired_token(self, client, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "SESSION_MAX_AGE_SECONDS", -1)

        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 401
        assert response.json()["message"] == "Sessão inválida ou expirada"

    def test_deleted_colaborador(self, client, session: Session, colaborador: Colaborador, auth_headers):
        session.delete(colaborador)
        session.commit()

        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 401

    def test_token_signed_with_other_key(self, client, colaborador: Colaborador, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "SECRET_KEY", "another-key")

        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 401
