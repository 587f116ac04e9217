"""Member repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Member
from repositories.utils import log_slow_query


class MemberRepository:
    """Repository for Member database operations.

    Lookups do not filter on status: withdrawn members still own their
    user_id and nickname.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, member_id: int) -> Member | None:
        """Get a member by primary key."""
        return await self.db.get(Member, member_id)

    async def get_by_user_id(self, user_id: str) -> Member | None:
        """Get a member by login id (unique constraint ensures one)."""
        result = await self.db.execute(select(Member).where(Member.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_by_nickname(self, nickname: str) -> Member | None:
        result = await self.db.execute(
            select(Member).where(Member.nickname == nickname)
        )
        return result.scalar_one_or_none()

    @log_slow_query("members.search_by_nickname")
    async def search_by_nickname(self, term: str) -> list[Member]:
        """Substring match on nickname.

        LIKE wildcards in `term` are escaped so they match literally.
        Case sensitivity follows the database collation.
        """
        result = await self.db.execute(
            select(Member)
            .where(Member.nickname.contains(term, autoescape=True))
            .order_by(Member.nickname)
        )
        return list(result.scalars().all())

    async def add(self, member: Member) -> Member:
        """Stage a member and flush so the generated id is available.

        Does NOT commit. Caller owns the transaction.
        """
        self.db.add(member)
        await self.db.flush()
        return member
