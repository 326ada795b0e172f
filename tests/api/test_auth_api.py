"""Tests for the authentication and profile endpoints."""

from fastapi.testclient import TestClient


class TestAuthEndpoints:
    def test_register_returns_user_and_token(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/api/v1/auth/register",
            json={
                "full_name": "Alice Example",
                "username": "alice",
                "email": "alice@example.com",
                "password": "secret123",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] is True
        assert body["data"]["user"]["username"] == "alice"
        assert "password_hash" not in body["data"]["user"]
        assert body["data"]["token"]
        assert body["meta"]["request_id"] == response.headers["X-Request-ID"]

    def test_register_duplicate_is_conflict(self, test_client: TestClient, register) -> None:
        register("alice")

        response = test_client.post(
            "/api/v1/auth/register",
            json={
                "full_name": "Other",
                "username": "alice",
                "email": "different@example.com",
                "password": "secret123",
            },
        )

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["status"] == 409
        assert detail["title"] == "Conflict"
        assert detail["instance"] == "/api/v1/auth/register"

    def test_register_validation(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/api/v1/auth/register",
            json={"full_name": "A", "username": "al", "email": "not-an-email", "password": "123"},
        )
        assert response.status_code == 422

    def test_login(self, test_client: TestClient, register) -> None:
        register("alice")

        ok = test_client.post("/api/v1/auth/login", json={"username": "alice", "password": "secret123"})
        bad = test_client.post("/api/v1/auth/login", json={"username": "alice", "password": "nope"})

        assert ok.status_code == 200
        assert ok.json()["data"]["token"]
        assert bad.status_code == 401

    def test_profile_requires_token(self, test_client: TestClient) -> None:
        missing = test_client.get("/api/v1/auth/profile")
        invalid = test_client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer garbage"})

        assert missing.status_code == 401
        assert invalid.status_code == 401
        assert invalid.json()["detail"]["detail"] == "Invalid token."

    def test_get_and_update_profile(self, test_client: TestClient, auth_headers) -> None:
        profile = test_client.get("/api/v1/auth/profile", headers=auth_headers)
        assert profile.status_code == 200
        assert profile.json()["data"]["user"]["username"] == "alice"

        updated = test_client.put(
            "/api/v1/auth/profile",
            headers=auth_headers,
            json={"full_name": "Alice Updated", "description": "Analyst"},
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["user"]["full_name"] == "Alice Updated"
        assert updated.json()["data"]["user"]["description"] == "Analyst"

    def test_update_profile_email_taken(self, test_client: TestClient, auth_headers, register) -> None:
        register("bob")

        response = test_client.put(
            "/api/v1/auth/profile", headers=auth_headers, json={"email": "bob@example.com"}
        )
        assert response.status_code == 409

    def test_null_profile_fields_are_left_unchanged(self, test_client: TestClient, auth_headers) -> None:
        response = test_client.put(
            "/api/v1/auth/profile",
            headers=auth_headers,
            json={"email": None, "full_name": None, "description": "Analyst"},
        )

        assert response.status_code == 200, response.text
        user = response.json()["data"]["user"]
        assert user["email"] == "alice@example.com"
        assert user["full_name"] == "Alice Example"
        assert user["description"] == "Analyst"

    def test_change_password(self, test_client: TestClient, auth_headers) -> None:
        wrong = test_client.put(
            "/api/v1/auth/password",
            headers=auth_headers,
            json={"current_password": "wrong", "new_password": "newsecret"},
        )
        assert wrong.status_code == 400

        changed = test_client.put(
            "/api/v1/auth/password",
            headers=auth_headers,
            json={"current_password": "secret123", "new_password": "newsecret"},
        )
        assert changed.status_code == 200

        login = test_client.post("/api/v1/auth/login", json={"username": "alice", "password": "newsecret"})
        assert login.status_code == 200


class TestPublicEndpoints:
    def test_health(self, test_client: TestClient) -> None:
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["llm_configured"] is True

    def test_root(self, test_client: TestClient) -> None:
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"
