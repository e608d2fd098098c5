"""Blog post lookups, listings, search and writes."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import bindparam
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, selectinload

from blog.config import BlogSettings, get_settings
from blog.db.models.core import Post, User
from blog.db.persistence import PersistenceService
from blog.db.query import QueryBuilder, QueryService
from blog.db.results import ResultCollection
from blog.db.session import Database
from blog.logging import logger
from blog.services.search import LIKE_ESCAPE, like_contains_pattern, ordered_search_terms
from blog.utils.datetime import utc_now


class PostRepository:
    def __init__(
        self,
        query_builder: QueryBuilder,
        query_service: QueryService,
        persistence_service: PersistenceService,
    ) -> None:
        self.query_builder = query_builder
        self.query_service = query_service
        self.persistence_service = persistence_service

    async def find(self, post_id: int) -> Post:
        query = (
            self.query_builder.create(Post)
            .where(Post.id == bindparam("id"))
            .set_parameter("id", post_id)
            .build()
        )
        result = await self.query_service.query(query)
        return result.get_single_result()

    async def find_by_slug(self, slug: str) -> Post:
        query = (
            self.query_builder.create(Post)
            .where(Post.slug == bindparam("slug"))
            .set_parameter("slug", slug)
            .build()
        )
        result = await self.query_service.query(query)
        return result.get_single_result()

    async def upsert(self, post: Post) -> None:
        await self.persistence_service.upsert(post)
        logger.info("post_upserted", post_id=post.id, slug=post.slug)

    async def delete(self, post: Post) -> None:
        post_id = post.id
        await self.persistence_service.delete(post)
        logger.info("post_deleted", post_id=post_id)

    async def find_by_author_ordered_by_publish_date(self, user: User) -> ResultCollection[Post]:
        query = (
            self.query_builder.create(Post)
            .where(Post.author_id == bindparam("user_id"))
            .order_by(Post.published_at.desc())
            .set_parameter("user_id", user.id)
            .build()
        )
        return await self.query_service.query(query)

    async def find_latest(self) -> ResultCollection[Post]:
        query = (
            self.query_builder.create(Post)
            .join(Post.author)
            .options(contains_eager(Post.author), selectinload(Post.tags))
            .where(Post.published_at <= bindparam("now"))
            .order_by(Post.published_at.desc())
            .set_parameter("now", utc_now())
            .build()
        )
        return await self.query_service.query(query)

    async def find_by_search_query(
        self, raw_query: str, limit: int | None = None
    ) -> ResultCollection[Post]:
        """Return posts whose title contains any of the query's terms, newest first.

        ``limit`` defaults to the builder's maximum and must be positive; a bad
        value raises ``ValueError`` even when the query has no usable terms.
        """

        if limit is None:
            limit = self.query_builder.default_max_results
        if limit < 1:
            raise ValueError("limit must be a positive integer.")

        terms = ordered_search_terms(raw_query)
        if not terms:
            logger.debug("post_search_skipped", raw_query=raw_query)
            return ResultCollection()

        builder = self.query_builder.create(Post)
        for index, term in enumerate(terms):
            key = f"t_{index}"
            builder.or_where(Post.title.like(bindparam(key), escape=LIKE_ESCAPE))
            builder.set_parameter(key, like_contains_pattern(term))
        builder.order_by(Post.published_at.desc()).set_max_results(limit)

        result = await self.query_service.query(builder.build())
        logger.info(
            "post_search_executed",
            term_count=len(terms),
            limit=limit,
            result_count=len(result),
        )
        return result


def build_post_repository(
    session: AsyncSession, settings: BlogSettings | None = None
) -> PostRepository:
    settings = settings or get_settings()
    return PostRepository(
        QueryBuilder(default_max_results=settings.query.default_max_results),
        QueryService(session),
        PersistenceService(session),
    )


@asynccontextmanager
async def post_repository_scope(
    database: Database, settings: BlogSettings | None = None
) -> AsyncIterator[PostRepository]:
    """Yield a repository bound to a fresh session, committing when the block succeeds."""

    async with database.session() as session:
        yield build_post_repository(session, settings or database.settings)
        await session.commit()


__all__ = ["PostRepository", "build_post_repository", "post_repository_scope"]
