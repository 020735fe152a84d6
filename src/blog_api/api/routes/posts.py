"""
Blog post API routes
All persistence goes through the posts service bound to the application.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status

from blog_api.models.post import PostCreateRequest, PostListResponse, PostResponse, PostUpdateRequest
from blog_api.services.posts_service import PostsService, get_posts_service
from blog_api.utils.errors import ValidationError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=PostListResponse)
async def list_posts(posts_service: PostsService = Depends(get_posts_service)):
    """List every blog post"""
    posts = await posts_service.find_all()
    return {"posts": [post.serialize() for post in posts]}


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, posts_service: PostsService = Depends(get_posts_service)):
    """Get a single blog post"""
    post = await posts_service.find_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post.serialize()


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: PostCreateRequest,
    posts_service: PostsService = Depends(get_posts_service)
):
    """Create a new blog post"""
    post = await posts_service.insert_one(request)
    logger.info(f"Created post {post.id}")
    return post.serialize()


@router.put("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_post(
    post_id: str,
    request: PostUpdateRequest,
    posts_service: PostsService = Depends(get_posts_service)
):
    """Update title, content or author of a blog post"""
    if request.id is None or request.id != post_id:
        raise ValidationError(
            f"Request path id ({post_id}) and request body id ({request.id}) must match"
        )

    updates = request.model_dump(exclude_unset=True, exclude={"id"})
    if not updates:
        raise ValidationError("No fields provided for update")

    logger.info(f"Updating post {post_id} fields: {sorted(updates)}")
    await posts_service.update_by_id(post_id, updates)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_post(post_id: str, posts_service: PostsService = Depends(get_posts_service)):
    """Delete a blog post"""
    await posts_service.delete_by_id(post_id)
    logger.info(f"Deleted post {post_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
