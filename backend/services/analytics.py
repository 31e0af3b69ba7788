"""AnalyticsService: the object routes talk to.

Owns the cache handle, the remote API client and the refresh pipeline. One
instance is built at startup and stored on ``app.state``; routes receive it
through the ``get_service`` dependency.
"""

import logging

from fastapi import Request

from config import Settings
from errors import InvalidPostTypeError
from services import ranking
from services.analytics_api import AnalyticsAPIClient
from services.cache import COMMENTS_KEY, POSTS_KEY, USERS_KEY, CacheStore, create_cache, read_json
from services.refresh import RefreshPipeline

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self, cache: CacheStore, api: AnalyticsAPIClient, ttl_seconds: int = 3600):
        self.cache = cache
        self.api = api
        self.pipeline = RefreshPipeline(cache, api, ttl_seconds=ttl_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalyticsService":
        api = AnalyticsAPIClient(
            settings.api_base_url,
            settings.api_key,
            timeout=settings.api_timeout_seconds,
        )
        return cls(create_cache(settings.redis_url), api, ttl_seconds=settings.cache_ttl_seconds)

    async def close(self) -> None:
        logger.info("Closing analytics service (%s cache)", self.cache.name)
        await self.api.aclose()
        await self.cache.close()

    # Refresh (writes)

    async def refresh_users(self) -> dict[str, str]:
        return await self.pipeline.fetch_users()

    async def refresh_posts(self) -> list[dict]:
        return await self.pipeline.fetch_posts()

    async def refresh_comments(self) -> dict[str, int]:
        return await self.pipeline.fetch_comments()

    async def refresh_all(self) -> dict[str, int]:
        return await self.pipeline.refresh_all()

    # Queries (read-only, never call the remote API)

    async def top_users(self) -> list[dict]:
        posts = await read_json(self.cache, POSTS_KEY, [])
        users = await read_json(self.cache, USERS_KEY, {})
        return ranking.top_users(posts, users)

    async def latest_posts(self) -> list[dict]:
        posts = await read_json(self.cache, POSTS_KEY, [])
        return ranking.latest_posts(posts)

    async def popular_posts(self) -> list[dict]:
        posts = await read_json(self.cache, POSTS_KEY, [])
        comments = await read_json(self.cache, COMMENTS_KEY, {})
        return ranking.popular_posts(posts, comments)

    async def posts(self, post_type: str | None) -> list[dict]:
        if post_type == "latest":
            return await self.latest_posts()
        if post_type == "popular":
            return await self.popular_posts()
        raise InvalidPostTypeError(post_type)

    async def cache_healthy(self) -> bool:
        return await self.cache.ping()


def get_service(request: Request) -> AnalyticsService:
    """FastAPI dependency returning the service built at startup."""
    return request.app.state.analytics
