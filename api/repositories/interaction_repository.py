"""Read-only queries over member interactions (scraps and likes)."""

from datetime import datetime
from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Interaction, InteractionType, Post


class ScrapRow(NamedTuple):
    post_id: int
    title: str
    scrapped_at: datetime


class InteractionRepository:
    """Repository for Interaction queries consumed by member views."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_by_member(
        self, member_id: int, interaction_type: InteractionType
    ) -> int:
        """Count a member's interactions of one type (0 when none)."""
        result = await self.db.execute(
            select(func.count(Interaction.id)).where(
                Interaction.member_id == member_id,
                Interaction.type == interaction_type,
            )
        )
        return result.scalar_one()

    async def list_scraps_by_member(self, member_id: int) -> list[ScrapRow]:
        """Posts the member scrapped, most recent scrap first."""
        result = await self.db.execute(
            select(Interaction.post_id, Post.title, Interaction.created_at)
            .join(Post, Post.id == Interaction.post_id)
            .where(
                Interaction.member_id == member_id,
                Interaction.type == InteractionType.SCRAP,
            )
            .order_by(Interaction.created_at.desc(), Interaction.id.desc())
        )
        return [ScrapRow(*row) for row in result.all()]
