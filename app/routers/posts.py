import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app import dependencies as deps
from app.schemas.blog import Post, PostSummary
from app.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostSummary])
def list_posts(
    lang: Optional[str] = None,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get all posts in a language, newest first."""
    try:
        return [post.summary() for post in service.get_all_posts(lang)]
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/recent", response_model=List[PostSummary])
def list_recent_posts(
    count: Optional[int] = Query(default=None, ge=0),
    lang: Optional[str] = None,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get the newest posts in a language."""
    try:
        return [post.summary() for post in service.get_recent_posts(count, lang)]
    except Exception as e:
        logger.error(f"Unexpected error listing recent posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug}", response_model=Post)
def get_post(
    slug: str,
    lang: Optional[str] = None,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug, falling back to the default language."""
    try:
        post = service.get_post_by_slug(slug, lang)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.get("/posts/{slug}/languages", response_model=List[str])
def get_post_languages(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get the languages a post is written in, in canonical order."""
    return service.get_available_languages(slug)
