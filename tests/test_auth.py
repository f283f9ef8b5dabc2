"""Tests for registration, login, logout and profile over REST."""

from tracker import config


class TestRegister:
    def test_register_returns_user_id(self, client):
        response = client.post("/register", json={"username": "alice", "password": "pw123"})
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully!"
        assert isinstance(body["user_id"], int)

    def test_register_same_username_twice(self, client):
        first = client.post("/register", json={"username": "alice", "password": "pw123"})
        second = client.post("/register", json={"username": "alice", "password": "other"})

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["code"] == "USER_EXISTS"

    def test_register_requires_username_and_password(self, client):
        response = client.post("/register", json={"username": "", "password": "pw123"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

        response = client.post("/register", json={"username": "bob"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_register_password_over_72_bytes(self, client):
        response = client.post("/register", json={"username": "bob", "password": "x" * 80})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"


class TestLogin:
    def test_login_sets_session_cookie(self, client):
        client.post("/register", json={"username": "alice", "password": "pw123"})
        response = client.post("/login", json={"username": "alice", "password": "pw123"})

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["username"] == "alice"
        assert body["session_token"]
        assert response.cookies.get(config.SESSION_COOKIE_NAME) == body["session_token"]

    def test_wrong_password_and_unknown_user_look_the_same(self, client):
        client.post("/register", json={"username": "alice", "password": "pw123"})

        wrong_password = client.post("/login", json={"username": "alice", "password": "nope"})
        unknown_user = client.post("/login", json={"username": "mallory", "password": "nope"})

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()
        assert wrong_password.json()["code"] == "INVALID_CREDENTIALS"

    def test_long_password_for_known_and_unknown_user(self, client):
        client.post("/register", json={"username": "alice", "password": "pw123"})

        known = client.post("/login", json={"username": "alice", "password": "x" * 80})
        unknown = client.post("/login", json={"username": "mallory", "password": "x" * 80})

        assert known.status_code == unknown.status_code == 401
        assert known.json() == unknown.json()
        assert known.json()["code"] == "INVALID_CREDENTIALS"

    def test_each_login_opens_a_new_session(self, client):
        client.post("/register", json={"username": "alice", "password": "pw123"})
        first = client.post("/login", json={"username": "alice", "password": "pw123"}).json()
        second = client.post("/login", json={"username": "alice", "password": "pw123"}).json()

        assert first["session_token"] != second["session_token"]
        client.cookies.clear()
        for token in (first["session_token"], second["session_token"]):
            response = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
            assert response.status_code == 200


class TestProfileAndLogout:
    def test_profile_returns_session_user(self, auth_client):
        response = auth_client.get("/profile")
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

    def test_profile_accepts_bearer_token(self, client):
        client.post("/register", json={"username": "alice", "password": "pw123"})
        token = client.post("/login", json={"username": "alice", "password": "pw123"}).json()["session_token"]
        client.cookies.clear()

        response = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

    def test_profile_without_session(self, client):
        response = client.get("/profile")
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_profile_with_bogus_token(self, client):
        response = client.get("/profile", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_logout_ends_session(self, auth_client):
        response = auth_client.delete("/logout")
        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully!"

        assert auth_client.get("/profile").status_code == 401

    def test_logout_without_session_is_unauthorized(self, auth_client):
        auth_client.delete("/logout")

        response = auth_client.delete("/logout")
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_entity_routes_require_session(self, client):
        for path in ("/issues", "/labels", "/milestones"):
            response = client.get(path)
            assert response.status_code == 401, path

    def test_stale_cookie_falls_back_to_bearer(self, client):
        client.post("/register", json={"username": "alice", "password": "pw123"})
        token = client.post("/login", json={"username": "alice", "password": "pw123"}).json()["session_token"]
        client.cookies.clear()
        headers = {
            "Cookie": f"{config.SESSION_COOKIE_NAME}=expired-token",
            "Authorization": f"Bearer {token}",
        }

        response = client.get("/profile", headers=headers)
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

        # Logout ends the bearer session, the one that validated
        assert client.delete("/logout", headers=headers).status_code == 200
        response = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
