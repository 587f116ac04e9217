"""Post repository for aggregate persistence and member post queries."""

from datetime import datetime
from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Post


class PostSummaryRow(NamedTuple):
    """Lightweight projection for listing a member's posts."""

    id: int
    title: str
    created_at: datetime


class PostRepository:
    """Repository for Post database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, post_id: int) -> Post | None:
        return await self.db.get(Post, post_id)

    async def add(self, post: Post) -> Post:
        """Stage the whole aggregate and flush so post.id is assigned.

        Category links and tags cascade from the post. Does NOT commit.
        """
        self.db.add(post)
        await self.db.flush()
        return post

    async def count_by_member(self, member_id: int) -> int:
        """Number of posts owned by a member (0 when none)."""
        result = await self.db.execute(
            select(func.count(Post.id)).where(Post.member_id == member_id)
        )
        return result.scalar_one()

    async def list_summaries_by_member(self, member_id: int) -> list[PostSummaryRow]:
        """A member's posts, newest first."""
        result = await self.db.execute(
            select(Post.id, Post.title, Post.created_at)
            .where(Post.member_id == member_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        return [PostSummaryRow(*row) for row in result.all()]
