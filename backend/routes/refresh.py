"""On-demand refresh routes. Always 200: upstream failures only empty the result."""

from fastapi import APIRouter, Depends

from services.analytics import AnalyticsService, get_service

router = APIRouter()


@router.get("/refresh-users")
async def refresh_users(service: AnalyticsService = Depends(get_service)) -> dict:
    users = await service.refresh_users()
    return {"message": "Users refreshed successfully", "users": users}


@router.get("/refresh-posts")
async def refresh_posts(service: AnalyticsService = Depends(get_service)) -> dict:
    posts = await service.refresh_posts()
    return {"message": "Posts refreshed successfully", "posts": posts}


@router.get("/refresh-comments")
async def refresh_comments(service: AnalyticsService = Depends(get_service)) -> dict:
    comments = await service.refresh_comments()
    return {"message": "Comments refreshed successfully", "comments": comments}
