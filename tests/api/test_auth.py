"""Tests for auth endpoints."""

from fastapi.testclient import TestClient


class TestRegisterLogin:
    def test_register(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"name": "Asha", "email": "asha@example.com", "password": "s3cret"},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["token"]
        assert data["user"]["email"] == "asha@example.com"
        assert "password_hash" not in data["user"]

    def test_register_duplicate(self, client):
        body = {"name": "Asha", "email": "asha@example.com", "password": "s3cret"}
        client.post("/api/auth/register", json=body)
        resp = client.post("/api/auth/register", json=body)
        assert resp.status_code == 409

    def test_register_missing_fields(self, client):
        resp = client.post("/api/auth/register", json={"email": "asha@example.com"})
        assert resp.status_code == 422

    def test_login(self, client):
        client.post(
            "/api/auth/register",
            json={"name": "Asha", "email": "asha@example.com", "password": "s3cret"},
        )
        resp = client.post(
            "/api/auth/login",
            json={"email": "asha@example.com", "password": "s3cret"},
        )
        assert resp.status_code == 200
        assert resp.json()["user"]["name"] == "Asha"

    def test_login_wrong_password(self, client):
        resp = client.post(
            "/api/auth/login",
            json={"email": "asha@example.com", "password": "wrong"},
        )
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Invalid credentials"}


class TestSessionToken:
    def test_token_unlocks_protected_routes(self, real_auth_app, sample_resume):
        client = TestClient(real_auth_app)
        token = client.post(
            "/api/auth/register",
            json={"name": "Asha", "email": "asha@example.com", "password": "s3cret"},
        ).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        me = client.get("/api/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["email"] == "asha@example.com"

        pdf = client.post(
            "/api/pdf/generate",
            json={"resumeData": sample_resume},
            headers=headers,
        )
        assert pdf.status_code == 200

    def test_me_without_token(self, real_auth_app):
        client = TestClient(real_auth_app)
        assert client.get("/api/auth/me").status_code == 401
