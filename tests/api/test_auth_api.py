from __future__ import annotations

import pytest

REGISTRATION = {
    "username": "dana",
    "firstname": "Dana",
    "lastname": "Levi",
    "country": "Israel",
    "password": "pass1!",
    "email": "dana@example.com",
}


def register(client, **overrides):
    return client.post("/api/auth/register", json=dict(REGISTRATION, **overrides))


class TestRegister:
    def test_register_login_and_me(self, client):
        created = register(client)
        assert created.status_code == 201
        assert created.get_json()["user"]["username"] == "dana"

        login = client.post("/api/auth/login", json={"username": "dana", "password": "pass1!"})
        assert login.status_code == 200
        token = login.get_json()["access_token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.get_json()["user"]["country"] == "Israel"
        assert me.get_json()["user"]["last_login"] is not None

    def test_duplicate_username_is_409(self, client):
        register(client)

        response = register(client, email="other@example.com")

        assert response.status_code == 409
        assert response.get_json() == {"message": "Username taken", "success": False}

    def test_duplicate_email_is_409(self, client):
        register(client)

        assert register(client, username="other").status_code == 409

    @pytest.mark.parametrize("overrides", [
        {"username": "ab"},
        {"username": "dana123"},
        {"password": "password"},
        {"password": "p1!"},
        {"email": "not-an-email"},
        {"country": "Atlantis"},
        {"lastname": ""},
    ])
    def test_invalid_registration_is_400(self, client, overrides):
        response = register(client, **overrides)

        assert response.status_code == 400
        assert response.get_json()["success"] is False


class TestLogin:
    def test_wrong_password_is_401(self, client):
        register(client)

        response = client.post("/api/auth/login", json={"username": "dana", "password": "wrong1!"})

        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid username or password"

    def test_missing_fields_is_400(self, client):
        assert client.post("/api/auth/login", json={"username": "dana"}).status_code == 400

    def test_refresh_issues_access_token(self, client):
        refresh_token = register(client).get_json()["refresh_token"]

        response = client.post("/api/auth/refresh", headers={"Authorization": f"Bearer {refresh_token}"})

        assert response.status_code == 200
        assert response.get_json()["access_token"]


def test_me_requires_token(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.get_json() == {"message": "Login required", "success": False}


def test_garbage_token_is_401(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.get_json()["success"] is False


def test_countries(client):
    assert client.get("/api/auth/countries").get_json() == ["France", "Israel", "Japan"]


def test_logout_clears_cooking_progress(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    client.post("/api/recipes/99/cooking-progress", json={"currentStep": 3}, headers=headers)

    client.post("/api/auth/logout", headers=headers)

    progress = client.get("/api/recipes/99/cooking-progress", headers=headers).get_json()
    assert progress["currentStep"] == 0


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}
