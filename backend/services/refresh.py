"""Refresh pipeline: pull users, posts and comment counts into the cache.

Each stage reads its input from the cache, not from the previous stage's
return value, so stages can also be triggered on their own. Order for a full
refresh is users -> posts -> comments.
"""

import logging

from errors import UpstreamError
from services.analytics_api import AnalyticsAPIClient
from services.cache import COMMENTS_KEY, POSTS_KEY, USERS_KEY, CacheStore, read_json, write_json

logger = logging.getLogger(__name__)


class RefreshPipeline:
    def __init__(self, cache: CacheStore, api: AnalyticsAPIClient, ttl_seconds: int = 3600):
        self.cache = cache
        self.api = api
        self.ttl_seconds = ttl_seconds

    async def _store(self, key: str, value: dict | list) -> None:
        if await write_json(self.cache, key, value, self.ttl_seconds):
            logger.info("Cached %s (%d entries, ttl=%ds)", key, len(value), self.ttl_seconds)
        else:
            logger.error("Could not cache %s; previous value (if any) kept", key)

    async def fetch_users(self) -> dict[str, str]:
        """Fetch the user directory. On failure the cached copy is left alone."""
        logger.info("Fetching users...")
        try:
            users = await self.api.get_users()
        except UpstreamError as e:
            logger.error("Failed to fetch users: %s", e)
            return {}

        await self._store(USERS_KEY, users)
        return users

    async def fetch_posts(self) -> list[dict]:
        logger.info("Fetching posts...")
        users = await read_json(self.cache, USERS_KEY, {})
        if not users:
            logger.warning("No cached users; posts will be empty")

        all_posts: list[dict] = []
        for user_id in users:
            try:
                posts = await self.api.get_user_posts(user_id)
            except UpstreamError as e:
                logger.error("Failed to get posts for user %s: %s", user_id, e)
                continue
            all_posts.extend(posts)
            logger.info("Retrieved %d posts for user %s", len(posts), user_id)

        await self._store(POSTS_KEY, all_posts)
        return all_posts

    async def fetch_comments(self) -> dict[str, int]:
        logger.info("Fetching comments...")
        posts = await read_json(self.cache, POSTS_KEY, [])

        comment_counts: dict[str, int] = {}
        for post in posts:
            post_id = post.get("id") if isinstance(post, dict) else None
            if post_id is None:
                continue
            try:
                comments = await self.api.get_post_comments(post_id)
            except UpstreamError as e:
                logger.error("Failed to fetch comments for post %s: %s", post_id, e)
                continue
            comment_counts[str(post_id)] = len(comments)

        await self._store(COMMENTS_KEY, comment_counts)
        return comment_counts

    async def refresh_all(self) -> dict[str, int]:
        """Run all three stages in dependency order; returns entry counts."""
        users = await self.fetch_users()
        posts = await self.fetch_posts()
        comments = await self.fetch_comments()
        return {"users": len(users), "posts": len(posts), "comments": len(comments)}
