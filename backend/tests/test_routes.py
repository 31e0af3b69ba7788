"""HTTP-level tests for the analytics API."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from app import create_app
from services.cache import write_json

POSTS = [{"id": 1, "userId": "a"}, {"id": 2, "userId": "a"}, {"id": 3, "userId": "b"}]
USERS = {"a": "Alice", "b": "Bob"}


@pytest.fixture
def client(service):
    return TestClient(create_app(service, scheduler_enabled=False))


@pytest.fixture
def seed(cache):
    def _seed(**documents):
        async def _write():
            for key, value in documents.items():
                await write_json(cache, key, value, 3600)

        asyncio.run(_write())

    return _seed


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Social Media Analytics Microservice!"}


def test_ready(client):
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_reports_cache(client):
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert data["cache"] == "connected"


def test_security_headers(client):
    response = client.get("/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


class TestTopUsers:
    def test_scenario(self, client, seed):
        seed(posts=POSTS, users=USERS)
        response = client.get("/users")
        assert response.status_code == 200
        assert response.json() == [
            {"id": "a", "name": "Alice", "post_count": 2},
            {"id": "b", "name": "Bob", "post_count": 1},
        ]

    def test_empty_cache(self, client):
        assert client.get("/users").json() == []

    def test_unknown_name_is_null(self, client, seed):
        seed(posts=POSTS)
        assert client.get("/users").json()[0] == {"id": "a", "name": None, "post_count": 2}


class TestPosts:
    def test_latest(self, client, seed):
        seed(posts=[{"id": n, "userId": "a"} for n in range(1, 9)])
        data = client.get("/posts", params={"type": "latest"}).json()
        assert [p["id"] for p in data] == [8, 7, 6, 5, 4]

    def test_popular_scenario(self, client, seed):
        seed(posts=POSTS, comments={"1": 3, "2": 5, "3": 5})
        data = client.get("/posts", params={"type": "popular"}).json()
        assert [p["id"] for p in data] == [2, 3]

    def test_popular_without_comments(self, client, seed):
        seed(posts=POSTS)
        response = client.get("/posts", params={"type": "popular"})
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize("params", [{"type": "unknown"}, {}])
    def test_invalid_type(self, client, params):
        response = client.get("/posts", params=params)
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid type parameter. Use 'latest' or 'popular'."}


class TestRefresh:
    def test_full_refresh_flow(self, client, fake_api):
        users = client.get("/refresh-users").json()
        assert users == {"message": "Users refreshed successfully", "users": {"1": "Alice", "2": "Bob"}}

        posts = client.get("/refresh-posts").json()
        assert posts["message"] == "Posts refreshed successfully"
        assert [p["id"] for p in posts["posts"]] == [10, 11, 12]

        comments = client.get("/refresh-comments").json()
        assert comments == {
            "message": "Comments refreshed successfully",
            "comments": {"10": 1, "11": 2, "12": 2},
        }

        assert client.get("/users").json() == [
            {"id": "1", "name": "Alice", "post_count": 2},
            {"id": "2", "name": "Bob", "post_count": 1},
        ]
        assert [p["id"] for p in client.get("/posts?type=popular").json()] == [11, 12]

    def test_upstream_failure_still_200(self, client, fake_api):
        fake_api.failing.add("users")
        response = client.get("/refresh-users")
        assert response.status_code == 200
        assert response.json()["users"] == {}

    def test_posts_without_users_is_empty(self, client, fake_api):
        response = client.get("/refresh-posts")
        assert response.status_code == 200
        assert response.json()["posts"] == []
        assert fake_api.requests == []

    def test_queries_never_call_remote(self, client, fake_api, seed):
        seed(posts=POSTS, users=USERS, comments={"1": 1})
        client.get("/users")
        client.get("/posts?type=latest")
        client.get("/posts?type=popular")
        assert fake_api.requests == []

    def test_malformed_upstream_posts_do_not_break_queries(self, client, fake_api):
        fake_api.posts["1"] = [{"id": 10, "userid": "1"}, None]
        client.get("/refresh-users")
        posts = client.get("/refresh-posts").json()["posts"]
        assert None not in posts
        client.get("/refresh-comments")

        response = client.get("/users")
        assert response.status_code == 200
        assert response.json() == [
            {"id": "1", "name": "Alice", "post_count": 1},
            {"id": "2", "name": "Bob", "post_count": 1},
        ]
        assert client.get("/posts?type=popular").status_code == 200

    def test_malformed_cached_posts_do_not_break_queries(self, client, seed):
        seed(posts=[None, {"id": 1, "userId": "a"}], users=USERS, comments={"1": 2})
        assert client.get("/users").status_code == 200
        assert client.get("/posts?type=latest").json() == [{"id": 1, "userId": "a"}]
        assert client.get("/posts?type=popular").json() == [{"id": 1, "userId": "a"}]
