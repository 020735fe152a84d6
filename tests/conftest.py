"""
pytest configuration and fixtures for the blog posts API suite
Session-level database provisioning, per-test seeding and teardown
"""

import os
import random
from typing import AsyncGenerator, Iterator, List

import httpx
import pytest
import pytest_asyncio

from blog_api.app import create_app
from blog_api.config.settings import TEST_DATABASE_URL
from blog_api.database.connection import close_db_pool, create_db_pool
from blog_api.models.post import Post
from blog_api.services.posts_service import PostsService
from tests.support.data_factory import BlogPostFactory
from tests.support.database import DatabaseUnavailable, DockerPostgres

SEED = int(os.getenv("BLOG_TEST_SEED", "4242"))
SEED_POST_COUNT = 10


def pytest_report_header(config):
    backend = "TEST_DATABASE_URL" if TEST_DATABASE_URL else f"docker ({DockerPostgres().image})"
    return f"blog posts database: {backend}, seed: {SEED}"


@pytest.fixture(scope="session")
def database_url() -> Iterator[str]:
    """Connection string of a real PostgreSQL, provisioned once per session"""
    if TEST_DATABASE_URL:
        yield TEST_DATABASE_URL
        return

    server = DockerPostgres()
    try:
        database = server.start()
    except DatabaseUnavailable as e:
        pytest.skip(f"PostgreSQL unavailable (set TEST_DATABASE_URL or start Docker): {e}")

    try:
        yield database.connection_url
    finally:
        server.stop()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source injected into the data factory"""
    return random.Random(SEED)


@pytest.fixture
def post_factory(rng: random.Random) -> BlogPostFactory:
    """Seeded test data generator, fresh for every test"""
    return BlogPostFactory(SEED, rng=rng)


@pytest_asyncio.fixture
async def posts_service(database_url: str) -> AsyncGenerator[PostsService, None]:
    """Store handle on its own pool; the collection is dropped after each test"""
    pool = await create_db_pool(database_url, min_size=1, max_size=2)
    service = PostsService(pool)

    await service.ensure_schema()
    try:
        yield service
    finally:
        await service.drop_collection()
        await close_db_pool(pool)


@pytest_asyncio.fixture
async def seeded_posts(posts_service: PostsService, post_factory: BlogPostFactory) -> List[Post]:
    """Insert the standard batch of synthetic posts"""
    return await posts_service.insert_many(post_factory.generate_posts(SEED_POST_COUNT))


@pytest_asyncio.fixture
async def client(posts_service: PostsService, seeded_posts: List[Post]) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to an app that uses this test's store"""
    app = create_app(posts_service=posts_service)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
