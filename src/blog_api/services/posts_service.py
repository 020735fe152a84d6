"""
Posts service - data access for the posts collection
"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import asyncpg
import pydantic
from fastapi import Request

from blog_api.database.connection import CREATE_POSTS_TABLE, DROP_POSTS_TABLE
from blog_api.models.post import AuthorName, Post, PostCreateRequest, UPDATABLE_FIELDS
from blog_api.utils.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

POST_COLUMNS = "id, author, title, content"

PostInput = Union[PostCreateRequest, Mapping[str, Any]]


def _to_post(row: Mapping[str, Any]) -> Post:
    return Post(
        id=row["id"],
        author=AuthorName(**row["author"]),
        title=row["title"],
        content=row["content"]
    )


def _coerce_create(record: PostInput) -> PostCreateRequest:
    if isinstance(record, PostCreateRequest):
        return record
    try:
        return PostCreateRequest.model_validate(record)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid post record: {e.error_count()} validation errors") from e


def _coerce_updates(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep updatable fields only, with the author as a plain dict"""
    updates = {}
    for name in UPDATABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if value is None:
            raise ValidationError(f"Field '{name}' cannot be null")
        if name == "author":
            if isinstance(value, AuthorName):
                value = value.model_dump()
            else:
                try:
                    value = AuthorName.model_validate(value).model_dump()
                except pydantic.ValidationError as e:
                    raise ValidationError("Field 'author' requires firstName and lastName") from e
        updates[name] = value
    return updates


class PostsService:
    """Data access layer for blog posts stored in PostgreSQL"""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    @asynccontextmanager
    async def _connection(self):
        """Acquire a pooled connection, reporting driver failures as StorageError"""
        if self.pool is None:
            raise StorageError("Database pool not initialized")
        try:
            async with self.pool.acquire() as conn:
                yield conn
        except STORAGE_ERRORS as e:
            logger.error(f"Database operation failed: {e}")
            raise StorageError(f"Database operation failed: {e}") from e

    async def ensure_schema(self):
        """Create the posts table if it does not exist"""
        async with self._connection() as conn:
            await conn.execute(CREATE_POSTS_TABLE)
        logger.info("Posts schema ensured")

    async def drop_collection(self):
        """Drop the whole posts table"""
        logger.warning("Dropping posts collection")
        async with self._connection() as conn:
            await conn.execute(DROP_POSTS_TABLE)

    async def ping(self) -> bool:
        async with self._connection() as conn:
            return await conn.fetchval("SELECT 1") == 1

    async def insert_many(self, records: Iterable[PostInput]) -> List[Post]:
        """
        Persist a batch of posts, assigning each a new id

        Args:
            records: Post payloads with author, title and content

        Returns:
            The stored posts in input order
        """
        posts = [
            Post(id=str(uuid.uuid4()), **_coerce_create(record).model_dump())
            for record in records
        ]
        if not posts:
            return []

        query = "INSERT INTO posts (id, author, title, content) VALUES ($1, $2, $3, $4)"
        logger.info(f"Inserting {len(posts)} posts")

        async with self._connection() as conn:
            async with conn.transaction():
                await conn.executemany(query, [
                    (post.id, post.author.model_dump(), post.title, post.content)
                    for post in posts
                ])
        return posts

    async def insert_one(self, record: PostInput) -> Post:
        posts = await self.insert_many([record])
        return posts[0]

    async def find_all(self) -> List[Post]:
        query = f"SELECT {POST_COLUMNS} FROM posts ORDER BY seq"
        logger.info(f"Executing READ query: {query}")

        async with self._connection() as conn:
            rows = await conn.fetch(query)
        return [_to_post(row) for row in rows]

    async def count(self) -> int:
        async with self._connection() as conn:
            return await conn.fetchval("SELECT COUNT(*) FROM posts")

    async def find_one(self) -> Optional[Post]:
        """Return the earliest stored post, or None when the collection is empty"""
        query = f"SELECT {POST_COLUMNS} FROM posts ORDER BY seq LIMIT 1"

        async with self._connection() as conn:
            row = await conn.fetchrow(query)
        return _to_post(row) if row else None

    async def find_by_id(self, post_id: str) -> Optional[Post]:
        query = f"SELECT {POST_COLUMNS} FROM posts WHERE id = $1"

        async with self._connection() as conn:
            row = await conn.fetchrow(query, post_id)
        return _to_post(row) if row else None

    async def update_by_id(self, post_id: str, fields: Mapping[str, Any]):
        """
        Merge the given fields into an existing post

        Fields outside title/content/author are ignored. An unknown id
        matches nothing and is not reported.
        """
        updates = _coerce_updates(fields)
        if not updates:
            return

        assignments = ", ".join(
            f"{name} = ${index}" for index, name in enumerate(updates, start=2)
        )
        query = f"UPDATE posts SET {assignments} WHERE id = $1"
        logger.info(f"Executing UPDATE: {query}")

        async with self._connection() as conn:
            result = await conn.execute(query, post_id, *updates.values())

        if result == "UPDATE 0":
            logger.info(f"Update matched no post with id {post_id}")

    async def delete_by_id(self, post_id: str):
        query = "DELETE FROM posts WHERE id = $1"
        logger.info(f"Executing DELETE: {query}")

        async with self._connection() as conn:
            result = await conn.execute(query, post_id)

        if result == "DELETE 0":
            logger.info(f"Delete matched no post with id {post_id}")


def get_posts_service(request: Request) -> PostsService:
    """Return the posts service bound to the running application"""
    return request.app.state.posts_service
