"""Tests for the user routes."""

from conftest import add_user, auth_headers


class TestCurrentUser:
    """Tests for /users/me."""

    def test_requires_sign_in(self, client):
        """Test anonymous callers get 401."""
        response = client.get("/users/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_profile(self, client):
        """Test the profile describes the caller."""
        user = add_user(client, profile_picture="https://example.com/a.png")

        response = client.get("/users/me", headers=auth_headers(client, user))

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == str(user.id)
        assert body["email"] == "alice@example.com"
        assert body["profile_picture"] == "https://example.com/a.png"
        assert body["is_admin"] is False

    def test_invalid_token(self, client):
        """Test a forged bearer token is treated as anonymous."""
        response = client.get("/users/me", headers={"Authorization": "Bearer forged"})
        assert response.status_code == 401

    def test_update_name(self, client):
        """Test the caller can rename themselves."""
        user = add_user(client)
        headers = auth_headers(client, user)

        response = client.patch("/users/me", json={"name": "Alice L."}, headers=headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Alice L."
        assert client.get("/users/me", headers=headers).json()["name"] == "Alice L."

    def test_empty_name_rejected(self, client):
        """Test an empty display name is refused."""
        user = add_user(client)
        response = client.patch(
            "/users/me", json={"name": ""}, headers=auth_headers(client, user)
        )
        assert response.status_code == 422

    def test_delete_account(self, client):
        """Test a deleted account can no longer authenticate."""
        user = add_user(client)
        headers = auth_headers(client, user)

        response = client.delete("/users/me", headers=headers)

        assert response.json() == {"status": "deleted"}
        assert client.get("/users/me", headers=headers).status_code == 401


class TestListUsers:
    """Tests for the admin user listing."""

    def test_non_admin_forbidden(self, client):
        """Test regular users cannot list accounts."""
        user = add_user(client)
        response = client.get("/users/", headers=auth_headers(client, user))
        assert response.status_code == 403

    def test_anonymous_unauthorized(self, client):
        """Test anonymous callers get 401 before the admin check."""
        assert client.get("/users/").status_code == 401

    def test_admin_lists_users(self, client):
        """Test admins see every account with a total."""
        admin = add_user(client, email="admin@example.com", is_admin=True)
        add_user(client, email="bob@example.com")
        add_user(client, email="carol@example.com")

        response = client.get("/users/?limit=2", headers=auth_headers(client, admin))

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert [u["email"] for u in body["users"]] == [
            "admin@example.com",
            "bob@example.com",
        ]
