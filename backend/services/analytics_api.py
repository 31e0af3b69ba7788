"""Client for the remote social media analytics API.

All endpoints are bearer-token authenticated GETs that wrap their payload in
a single envelope key:

    GET /users                   -> {"users": {"<id>": "<name>", ...}}
    GET /users/{id}/posts        -> {"posts": [{"id": 1, "userid": "<id>", ...}]}
    GET /posts/{id}/comments     -> {"comments": [{...}, ...]}

Every failure mode (transport, status, body) is raised as UpstreamError so
callers only have one thing to catch.
"""

import logging

import httpx

from errors import UpstreamError

logger = logging.getLogger(__name__)


class AnalyticsAPIClient:
    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, envelope: str, expected: type):
        try:
            resp = await self._client.get(path)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(path, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise UpstreamError(path, f"invalid JSON body: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get(envelope), expected):
            raise UpstreamError(path, f"response has no '{envelope}' {expected.__name__}")
        return data[envelope]

    async def get_users(self) -> dict[str, str]:
        users = await self._get("users", "users", dict)
        return {str(user_id): name for user_id, name in users.items()}

    async def get_user_posts(self, user_id: str) -> list[dict]:
        posts = await self._get(f"users/{user_id}/posts", "posts", list)
        records = [post for post in posts if isinstance(post, dict)]
        if len(records) != len(posts):
            logger.warning("Dropped %d malformed posts for user %s", len(posts) - len(records), user_id)
        return records

    async def get_post_comments(self, post_id) -> list[dict]:
        return await self._get(f"posts/{post_id}/comments", "comments", list)
