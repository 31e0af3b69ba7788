"""Query routes over the cached documents.

GET /users → top 5 users by post count
GET /posts → latest 5 posts, or every post tied for most comments
"""

from fastapi import APIRouter, Depends, Query

from services.analytics import AnalyticsService, get_service

router = APIRouter()


@router.get("/users")
async def top_users(service: AnalyticsService = Depends(get_service)) -> list[dict]:
    return await service.top_users()


@router.get("/posts")
async def posts(
    post_type: str | None = Query(None, alias="type"),
    service: AnalyticsService = Depends(get_service),
) -> list[dict]:
    """``type=latest`` or ``type=popular``; anything else is a 400."""
    return await service.posts(post_type)
