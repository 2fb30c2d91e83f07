"""认证与用户接口测试"""
import uuid


def _email():
    return f"auth-{uuid.uuid4().hex[:12]}@example.com"


class TestRegister:

    def test_register_returns_user(self, client):
        email = _email()
        response = client.post(
            "/api/auth/register",
            json={"name": "  Ada Lovelace ", "email": email.upper(), "password": "secret123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == email
        assert data["name"] == "Ada Lovelace"
        assert data["is_active"] is True
        assert "password_hash" not in data

    def test_duplicate_email(self, client, user):
        response = client.post(
            "/api/auth/register",
            json={"name": "Someone", "email": user.email, "password": "secret123"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "An account with this email already exists"

    def test_short_password_is_400(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Someone", "email": _email(), "password": "123"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"]
        assert body["errors"][0]["field"] == "password"


class TestLogin:

    def test_wrong_password(self, client, user):
        response = client.post("/api/auth/login", json={"email": user.email, "password": "wrong-password"})
        assert response.status_code == 401
        assert response.json() == {"error": "Incorrect email or password"}

    def test_unknown_email(self, client):
        response = client.post("/api/auth/login", json={"email": _email(), "password": "secret123"})
        assert response.status_code == 401

    def test_tokens_issued(self, user):
        assert user.tokens["token_type"] == "bearer"
        assert user.tokens["access_token"]
        assert user.tokens["refresh_token"]


class TestTokens:

    def test_missing_token(self, client):
        response = client.get("/api/users/me")
        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated. Please log in."}

    def test_garbage_token(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_refresh_token_cannot_access_api(self, client, user):
        headers = {"Authorization": f"Bearer {user.tokens['refresh_token']}"}
        assert client.get("/api/users/me", headers=headers).status_code == 401

    def test_refresh(self, client, user):
        response = client.post("/api/auth/refresh", json={"refresh_token": user.tokens["refresh_token"]})
        assert response.status_code == 200
        access = response.json()["access_token"]
        me = client.get("/api/users/me", headers={"Authorization": f"Bearer {access}"})
        assert me.json()["email"] == user.email

    def test_access_token_cannot_refresh(self, client, user):
        response = client.post("/api/auth/refresh", json={"refresh_token": user.tokens["access_token"]})
        assert response.status_code == 401

    def test_logout(self, user):
        response = user.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"message": "Logout successful"}


class TestUsers:

    def test_me(self, user):
        response = user.get("/api/users/me")
        assert response.status_code == 200
        assert response.json()["email"] == user.email

    def test_update_name(self, user):
        response = user.patch("/api/users/me", json={"name": "New Name"})
        assert response.status_code == 200
        assert response.json()["name"] == "New Name"

    def test_change_password(self, client, user):
        response = user.patch(
            "/api/users/me/password",
            json={"old_password": user.password, "new_password": "another-secret"},
        )
        assert response.status_code == 200

        old = client.post("/api/auth/login", json={"email": user.email, "password": user.password})
        assert old.status_code == 401
        new = client.post("/api/auth/login", json={"email": user.email, "password": "another-secret"})
        assert new.status_code == 200

    def test_change_password_wrong_old(self, user):
        response = user.patch(
            "/api/users/me/password",
            json={"old_password": "wrong-password", "new_password": "another-secret"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Current password is incorrect"


class TestSystem:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["app"] == "WebLauncher"
