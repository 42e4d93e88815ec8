"""End-to-end tests for the comment API."""

import asyncio
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from comdeply.config import Settings
from comdeply.interface.api.app import create_app
from comdeply.persistence.repository.inmemory import InMemorySiteRepository
from comdeply.util.jwt import create_token
from tests.conftest import SITE_KEY, make_site
from tests.di import build_api_test_container

PAGE = "posts/hello-world"
THREAD_URL = f"/sites/{SITE_KEY}/pages/{PAGE}/comments"


def _token(user_id: str, name: str = "Tester", is_admin: bool = False) -> str:
    return create_token(user_id, name, Settings().auth, is_admin=is_admin)


def _login(client: TestClient, token: str | None) -> None:
    client.cookies.clear()
    if token:
        client.cookies.set("auth_token", token)


@pytest.fixture
def client():
    """Create test client backed by shared in-memory repositories."""
    site_repo = InMemorySiteRepository()
    asyncio.run(site_repo.save(make_site()))
    asyncio.run(site_repo.save(make_site(site_key="closed", is_active=False)))
    app_instance = create_app(container=build_api_test_container(site_repo))
    return TestClient(app_instance)


@pytest.fixture
def alice() -> str:
    return _token(str(uuid4()), "Alice")


@pytest.fixture
def bob() -> str:
    return _token(str(uuid4()), "Bob")


def _post(client: TestClient, token: str, content: str, parent_id=None) -> dict:
    _login(client, token)
    response = client.post(
        THREAD_URL, json={"content": content, "parent_id": parent_id}
    )
    assert response.status_code == 201, response.text
    return response.json()["comment"]


class TestHealth:
    """GET /health."""

    def test_health(self, client):
        # Act
        response = client.get("/health")

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestThreadFlow:
    """Posting, replying and reading a thread."""

    def test_post_and_read_thread(self, client, alice, bob):
        # Arrange
        root = _post(client, alice, "Nice article")
        reply = _post(client, bob, "Agreed", parent_id=root["comment_id"])

        # Act
        _login(client, None)
        response = client.get(THREAD_URL)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["total_roots"] == 1
        [node] = data["comments"]
        assert node["content"] == "Nice article"
        assert node["author_name"] == "Alice"
        assert node["sort_order"] == "1"
        assert [c["comment_id"] for c in node["children"]] == [reply["comment_id"]]
        assert node["children"][0]["depth"] == 2

    def test_flat_list_and_counts(self, client, alice):
        # Arrange
        _post(client, alice, "One")
        _post(client, alice, "Two")

        # Act
        flat = client.get(f"{THREAD_URL}/flat")
        count = client.get(f"{THREAD_URL}/count")
        counts = client.post(
            f"/sites/{SITE_KEY}/comments/counts", json={"page_ids": [PAGE, "other"]}
        )

        # Assert
        assert [c["content"] for c in flat.json()["comments"]] == ["One", "Two"]
        assert flat.json()["total"] == 2
        assert count.json()["count"] == 2
        assert counts.json()["counts"] == {PAGE: 2, "other": 0}

    def test_my_comments(self, client, alice, bob):
        # Arrange
        _post(client, alice, "Mine")
        _post(client, bob, "Not mine")

        # Act
        _login(client, alice)
        response = client.get("/users/me/comments")

        # Assert
        assert response.status_code == 200
        assert [c["content"] for c in response.json()["comments"]] == ["Mine"]

    def test_delete_with_reply_leaves_redacted_tombstone(self, client, alice, bob):
        # Arrange
        root = _post(client, alice, "Regrettable")
        _post(client, bob, "Reply", parent_id=root["comment_id"])

        # Act
        _login(client, alice)
        deleted = client.delete(f"/comments/{root['comment_id']}")
        thread = client.get(THREAD_URL).json()

        # Assert
        assert deleted.status_code == 200
        assert deleted.json()["state"] == "deleted_with_descendants"
        node = thread["comments"][0]
        assert node["is_deleted"] is True
        assert node["author_id"] is None
        assert node["content"] != "Regrettable"
        assert node["children"][0]["content"] == "Reply"


class TestErrors:
    """Authentication and domain error mapping."""

    def test_posting_requires_login(self, client):
        # Act
        _login(client, None)
        response = client.post(THREAD_URL, json={"content": "Anonymous"})

        # Assert
        assert response.status_code == 401

    def test_unknown_site_is_404(self, client, alice):
        # Act
        _login(client, alice)
        response = client.post(
            "/sites/nowhere/pages/x/comments", json={"content": "Hello"}
        )

        # Assert
        assert response.status_code == 404
        assert response.json()["type"] == "not_found"

    def test_inactive_site_is_403(self, client, alice):
        # Act
        _login(client, alice)
        response = client.post(
            "/sites/closed/pages/x/comments", json={"content": "Hello"}
        )

        # Assert
        assert response.status_code == 403
        assert response.json()["type"] == "site_inactive"

    def test_editing_someone_elses_comment_is_403(self, client, alice, bob):
        # Arrange
        comment = _post(client, alice, "Original")

        # Act
        _login(client, bob)
        response = client.patch(
            f"/comments/{comment['comment_id']}", json={"content": "Hijacked"}
        )

        # Assert
        assert response.status_code == 403
        assert response.json()["type"] == "not_owner"

    def test_editing_deleted_comment_is_409(self, client, alice):
        # Arrange
        comment = _post(client, alice, "Short-lived")
        client.delete(f"/comments/{comment['comment_id']}")

        # Act
        response = client.patch(
            f"/comments/{comment['comment_id']}", json={"content": "Back"}
        )

        # Assert
        assert response.status_code == 409
        assert response.json()["type"] == "comment_deleted"

    def test_deleting_twice_is_409(self, client, alice):
        # Arrange
        comment = _post(client, alice, "Once")
        client.delete(f"/comments/{comment['comment_id']}")

        # Act
        response = client.delete(f"/comments/{comment['comment_id']}")

        # Assert
        assert response.status_code == 409
        assert response.json()["type"] == "already_deleted"

    def test_malformed_comment_id_is_400(self, client, alice):
        # Act
        _login(client, alice)
        response = client.patch("/comments/not-a-uuid", json={"content": "x"})

        # Assert
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"


class TestReactions:
    """POST /comments/{id}/reactions."""

    def test_toggle_and_flip(self, client, alice, bob):
        # Arrange
        comment = _post(client, alice, "Rate me")
        url = f"/comments/{comment['comment_id']}/reactions"
        _login(client, bob)

        # Act
        liked = client.post(url, json={"reaction_type": "like"}).json()
        flipped = client.post(url, json={"reaction_type": "dislike"}).json()
        removed = client.post(url, json={"reaction_type": "dislike"}).json()

        # Assert
        assert (liked["like_count"], liked["viewer_reaction"]) == (1, "like")
        assert (flipped["like_count"], flipped["dislike_count"]) == (0, 1)
        assert removed["dislike_count"] == 0
        assert removed["viewer_reaction"] is None

    def test_thread_shows_viewer_reaction(self, client, alice, bob):
        # Arrange
        comment = _post(client, alice, "Rate me")
        _login(client, bob)
        client.post(
            f"/comments/{comment['comment_id']}/reactions",
            json={"reaction_type": "like"},
        )

        # Act
        as_bob = client.get(THREAD_URL).json()
        _login(client, alice)
        as_alice = client.get(THREAD_URL).json()

        # Assert
        assert as_bob["comments"][0]["viewer_reaction"] == "like"
        assert as_alice["comments"][0]["viewer_reaction"] is None
        assert as_alice["comments"][0]["like_count"] == 1

    def test_reacting_requires_login(self, client, alice):
        # Arrange
        comment = _post(client, alice, "Rate me")
        _login(client, None)

        # Act
        response = client.post(
            f"/comments/{comment['comment_id']}/reactions",
            json={"reaction_type": "like"},
        )

        # Assert
        assert response.status_code == 401


class TestAdmin:
    """Administrator routes."""

    def test_non_admin_is_403(self, client, alice):
        # Arrange
        comment = _post(client, alice, "Spam?")

        # Act
        response = client.delete(f"/admin/comments/{comment['comment_id']}")

        # Assert
        assert response.status_code == 403

    def test_admin_can_moderate(self, client, alice):
        # Arrange
        comment = _post(client, alice, "Borderline")
        _login(client, _token(str(uuid4()), "Admin", is_admin=True))

        # Act
        approved = client.patch(
            f"/admin/comments/{comment['comment_id']}/status",
            json={"status": "approved"},
        )
        recount = client.post(f"/admin/comments/{comment['comment_id']}/recount")
        removed = client.delete(f"/admin/comments/{comment['comment_id']}")

        # Assert
        assert approved.status_code == 200
        assert approved.json()["comment"]["status"] == "approved"
        assert recount.json()["like_count"] == 0
        assert removed.json()["state"] == "deleted_leaf"

    def test_admin_reorder(self, client, alice):
        # Arrange
        _post(client, alice, "First")
        _post(client, alice, "Second")
        _login(client, _token(str(uuid4()), "Admin", is_admin=True))

        # Act
        response = client.post(f"/admin/sites/{SITE_KEY}/pages/{PAGE}/reorder")

        # Assert
        assert response.status_code == 200
        assert response.json()["page_id"] == PAGE
        assert response.json()["changed"] == 0

    def test_admin_reorder_refuses_a_crowded_comment(self, client, alice):
        # Arrange
        root = _post(client, alice, "Root")
        reply = _post(client, alice, "Reply", parent_id=root["comment_id"])
        for i in range(10):
            _post(client, alice, f"Nested {i}", parent_id=reply["comment_id"])
        _login(client, _token(str(uuid4()), "Admin", is_admin=True))

        # Act
        response = client.post(f"/admin/sites/{SITE_KEY}/pages/{PAGE}/reorder")

        # Assert
        assert response.status_code == 409
        assert response.json()["type"] == "sort_key_conflict"
        assert reply["comment_id"] in response.json()["message"]
        assert "10 replies" in response.json()["message"]
