"""Read-only comment queries used by member views."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Comment


class CommentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_by_member(self, member_id: int) -> Sequence[Comment]:
        """All comments written by a member, newest first."""
        result = await self.db.execute(
            select(Comment)
            .where(Comment.member_id == member_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return result.scalars().all()
