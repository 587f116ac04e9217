"""Composition root for the Trip Share core.

TripShareApp wires settings, the engine, the password hasher, repositories
and services together explicitly. Each public method is one operation:
validate the input, open a unit of work, build the services bound to that
session, and call them.

Usage:
    app = TripShareApp.from_settings(get_settings())
    member_id = await app.create_member("tripper1", "Wanderer", "secret123")
    await app.dispose()
"""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.config import Settings
from core.database import (
    create_engine,
    create_session_maker,
    dispose_engine,
    unit_of_work,
)
from core.security import PasswordHasher
from models import Member
from repositories import (
    CategoryRepository,
    CommentRepository,
    ImageRepository,
    InteractionRepository,
    LocationRepository,
    MemberRepository,
    PostRepository,
)
from schemas import (
    CreateMemberRequest,
    CreatePostRequest,
    LoginMemberRequest,
    MemberCommentSummary,
    MemberInfo,
    MemberPostSummary,
    MemberScrapSummary,
    MemberSearchResult,
    UpdateMemberRequest,
)
from services.members_service import MemberNotFoundError, MemberService
from services.posts_service import PostService
from services.validation import (
    ensure_valid,
    validate_create_member,
    validate_create_post,
    validate_login,
    validate_update_member,
)


class TripShareApp:
    """Entry points for member and post operations."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        hasher: PasswordHasher,
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_maker = session_maker
        self._hasher = hasher
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "TripShareApp":
        engine = create_engine(settings)
        return cls(
            create_session_maker(engine),
            PasswordHasher.from_settings(settings),
            engine=engine,
        )

    async def dispose(self) -> None:
        if self._engine is not None:
            await dispose_engine(self._engine)

    def _member_service(self, session: AsyncSession) -> MemberService:
        return MemberService(
            MemberRepository(session),
            PostRepository(session),
            InteractionRepository(session),
            CommentRepository(session),
            self._hasher,
        )

    def _post_service(self, session: AsyncSession) -> PostService:
        return PostService(
            MemberRepository(session),
            PostRepository(session),
            CategoryRepository(session),
            LocationRepository(session),
            ImageRepository(session),
        )

    @staticmethod
    async def _require_member(session: AsyncSession, member_id: int) -> Member:
        member = await MemberRepository(session).get_by_id(member_id)
        if member is None:
            raise MemberNotFoundError(member_id=member_id)
        return member

    async def create_member(
        self,
        user_id: str,
        nickname: str,
        password: str,
        image_url: str | None = None,
    ) -> int:
        request = CreateMemberRequest(
            user_id=user_id, nickname=nickname, password=password, image_url=image_url
        )
        ensure_valid(validate_create_member(request))

        async with unit_of_work(self._session_maker) as session:
            member = await self._member_service(session).create_member(request)
            return member.id

    async def login_member(self, user_id: str, password: str) -> Member:
        request = LoginMemberRequest(user_id=user_id, password=password)
        ensure_valid(validate_login(request))

        async with unit_of_work(self._session_maker) as session:
            return await self._member_service(session).login_member(request)

    async def update_member(
        self,
        member_id: int,
        user_id: str,
        password: str,
        nickname: str,
        image_url: str | None = None,
    ) -> None:
        request = UpdateMemberRequest(
            user_id=user_id, nickname=nickname, password=password, image_url=image_url
        )
        ensure_valid(validate_update_member(request))

        async with unit_of_work(self._session_maker) as session:
            member = await self._require_member(session, member_id)
            await self._member_service(session).update_member(member, request)

    async def delete_member(self, member_id: int) -> None:
        async with unit_of_work(self._session_maker) as session:
            member = await self._require_member(session, member_id)
            await self._member_service(session).delete_member(member)

    async def search_member(self, term: str) -> list[MemberSearchResult]:
        async with unit_of_work(self._session_maker) as session:
            return await self._member_service(session).search_members(term)

    async def get_member_info(self, member_id: int) -> MemberInfo:
        async with unit_of_work(self._session_maker) as session:
            member = await self._require_member(session, member_id)
            return await self._member_service(session).get_member_info(member)

    async def list_member_posts(self, member_id: int) -> list[MemberPostSummary]:
        async with unit_of_work(self._session_maker) as session:
            member = await self._require_member(session, member_id)
            return await self._member_service(session).list_member_posts(member)

    async def list_member_comments(
        self, member_id: int
    ) -> list[MemberCommentSummary]:
        async with unit_of_work(self._session_maker) as session:
            member = await self._require_member(session, member_id)
            return await self._member_service(session).list_member_comments(member)

    async def list_member_scraps(self, member_id: int) -> list[MemberScrapSummary]:
        async with unit_of_work(self._session_maker) as session:
            member = await self._require_member(session, member_id)
            return await self._member_service(session).list_member_scraps(member)

    async def create_post(
        self,
        owner_id: int,
        title: str,
        content: str,
        category_ids: Sequence[int] = (),
        location_ids: Sequence[int] = (),
        image_ids: Sequence[int] = (),
        tags: Sequence[str] = (),
    ) -> int:
        request = CreatePostRequest(
            title=title,
            content=content,
            category_ids=list(category_ids),
            location_ids=list(location_ids),
            image_ids=list(image_ids),
            tags=list(tags),
        )
        ensure_valid(validate_create_post(request))

        async with unit_of_work(self._session_maker) as session:
            return await self._post_service(session).create_post(owner_id, request)
