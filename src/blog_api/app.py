"""
Blog Posts API Server
Core functionality: create, list, update and delete blog posts
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blog_api.api.routes import health, posts
from blog_api.config.settings import ALLOWED_ORIGINS, LOG_LEVEL, get_database_url
from blog_api.database.connection import close_db_pool, create_db_pool
from blog_api.services.posts_service import PostsService
from blog_api.utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(posts_service: Optional[PostsService] = None, database_url: Optional[str] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        posts_service: Ready-to-use data access layer. When given, the app
            uses it as is and leaves its lifecycle to the caller.
        database_url: Connection string used when no service is given
            (defaults to the environment configuration)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        if posts_service is not None:
            yield
            return

        pool = await create_db_pool(database_url or get_database_url())
        service = PostsService(pool)
        await service.ensure_schema()
        app.state.posts_service = service
        try:
            yield
        finally:
            await close_db_pool(pool)

    app = FastAPI(
        title="Blog Posts API",
        description="CRUD API for blog posts",
        version="1.0.0",
        lifespan=lifespan
    )
    if posts_service is not None:
        app.state.posts_service = posts_service

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(posts.router, prefix="/posts", tags=["Posts"])

    return app


# Exported for uvicorn; server startup is handled by main.py at the project root
app = create_app()
