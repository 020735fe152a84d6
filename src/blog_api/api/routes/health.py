"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException

from blog_api.services.posts_service import PostsService, get_posts_service
from blog_api.utils.errors import StorageError

router = APIRouter()


@router.get("/health")
async def health_check(posts_service: PostsService = Depends(get_posts_service)):
    """Report service health, including database connectivity"""
    try:
        database_ok = await posts_service.ping()
    except StorageError as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {e.message}")

    if not database_ok:
        raise HTTPException(status_code=503, detail="Health check failed: database ping returned no result")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected"
    }
