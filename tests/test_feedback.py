"""Tests for the feedback routes."""

from conftest import add_event, add_user, auth_headers


class TestSubmitFeedback:
    """Tests for POST /api/feedback/."""

    def test_anonymous_feedback(self, client):
        """Test visitors can leave feedback without signing in."""
        response = client.post("/api/feedback/", json={"rating": 5, "message": "Great"})

        assert response.status_code == 201
        body = response.json()
        assert body["rating"] == 5
        assert body["message"] == "Great"
        assert body["user_id"] is None
        assert body["event_id"] is None

    def test_signed_in_author_recorded(self, client):
        """Test a signed-in caller is recorded as the author."""
        user = add_user(client)
        organizer = add_user(client, email="org@example.com")
        event = add_event(client, organizer)

        response = client.post(
            "/api/feedback/",
            json={"rating": 4, "event_id": str(event.id)},
            headers=auth_headers(client, user),
        )

        assert response.status_code == 201
        assert response.json()["user_id"] == str(user.id)
        assert response.json()["event_id"] == str(event.id)

    def test_rating_bounds(self, client):
        """Test ratings outside 1-5 are rejected."""
        assert client.post("/api/feedback/", json={"rating": 0}).status_code == 422
        assert client.post("/api/feedback/", json={"rating": 6}).status_code == 422
        assert client.post("/api/feedback/", json={}).status_code == 422

    def test_unknown_event(self, client):
        """Test feedback about a missing event is a 404."""
        response = client.post(
            "/api/feedback/",
            json={"rating": 3, "event_id": "00000000-0000-0000-0000-000000000000"},
        )
        assert response.status_code == 404


class TestManageFeedback:
    """Tests for the admin feedback endpoints."""

    def test_listing_requires_admin(self, client):
        """Test regular users cannot read feedback."""
        user = add_user(client)
        assert client.get("/api/feedback/").status_code == 401
        assert client.get("/api/feedback/", headers=auth_headers(client, user)).status_code == 403

    def test_admin_lists_and_filters(self, client):
        """Test admins read all feedback or one event's."""
        admin = add_user(client, email="admin@example.com", is_admin=True)
        event = add_event(client, admin)
        client.post("/api/feedback/", json={"rating": 2})
        client.post("/api/feedback/", json={"rating": 5, "event_id": str(event.id)})
        headers = auth_headers(client, admin)

        assert len(client.get("/api/feedback/", headers=headers).json()) == 2

        filtered = client.get(f"/api/feedback/?event_id={event.id}", headers=headers).json()
        assert [f["rating"] for f in filtered] == [5]

    def test_admin_deletes(self, client):
        """Test admins can remove an entry."""
        admin = add_user(client, email="admin@example.com", is_admin=True)
        entry = client.post("/api/feedback/", json={"rating": 1}).json()
        headers = auth_headers(client, admin)

        response = client.delete(f"/api/feedback/{entry['id']}", headers=headers)

        assert response.json() == {"status": "deleted"}
        assert client.get("/api/feedback/", headers=headers).json() == []
        assert client.delete(f"/api/feedback/{entry['id']}", headers=headers).status_code == 404
