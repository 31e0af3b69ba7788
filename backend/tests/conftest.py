"""Shared fixtures: an in-memory cache and a fake remote analytics API."""

import httpx
import pytest

from services.analytics import AnalyticsService
from services.analytics_api import AnalyticsAPIClient
from services.cache import TTLCache

BASE_URL = "http://analytics.test/evaluation-service"
API_PREFIX = "/evaluation-service/"


class FakeAnalyticsAPI:
    """Serves users/posts/comments from dicts; ids in ``failing`` answer 500."""

    def __init__(self, users=None, posts=None, comments=None):
        self.users = users if users is not None else {}
        self.posts = posts if posts is not None else {}
        self.comments = comments if comments is not None else {}
        self.failing: set[str] = set()
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        if path in self.failing:
            return httpx.Response(500, json={"message": "boom"})

        parts = path.split("/")
        if parts == ["users"]:
            return httpx.Response(200, json={"users": self.users})
        if len(parts) == 3 and parts[0] == "users" and parts[2] == "posts":
            return httpx.Response(200, json={"posts": self.posts.get(parts[1], [])})
        if len(parts) == 3 and parts[0] == "posts" and parts[2] == "comments":
            return httpx.Response(200, json={"comments": self.comments.get(parts[1], [])})
        return httpx.Response(404, json={"message": "not found"})

    @property
    def paths(self) -> list[str]:
        return [r.url.path.removeprefix(API_PREFIX) for r in self.requests]


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake_api():
    return FakeAnalyticsAPI(
        users={"1": "Alice", "2": "Bob"},
        posts={
            "1": [{"id": 10, "userid": "1", "content": "a"}, {"id": 11, "userid": "1", "content": "b"}],
            "2": [{"id": 12, "userid": "2", "content": "c"}],
        },
        comments={
            "10": [{"id": 1}],
            "11": [{"id": 2}, {"id": 3}],
            "12": [{"id": 4}, {"id": 5}],
        },
    )


@pytest.fixture
def api_client(fake_api):
    return AnalyticsAPIClient(BASE_URL, "secret-token", transport=httpx.MockTransport(fake_api))


@pytest.fixture
def cache():
    return TTLCache()


@pytest.fixture
def service(cache, api_client):
    return AnalyticsService(cache, api_client, ttl_seconds=3600)
