"""Member identity lifecycle: registration, login, profile update, withdrawal.

This module handles member business logic:
- Uniqueness of user_id and nickname across active and withdrawn members
- Credential verification with a fixed check order
  (existence -> withdrawal -> password)
- Soft deletion (withdrawal); members are never removed from storage
- Read views: search, member info counts, own posts/comments/scraps

The service never commits. The unit of work around each call does.
"""

from enum import Enum as PyEnum

from core.logger import get_logger
from core.security import PasswordHasher
from models import InteractionType, Member, MemberStatus
from repositories.comment_repository import CommentRepository
from repositories.interaction_repository import InteractionRepository
from repositories.member_repository import MemberRepository
from repositories.post_repository import PostRepository
from schemas import (
    CreateMemberRequest,
    LoginMemberRequest,
    MemberCommentSummary,
    MemberInfo,
    MemberPostSummary,
    MemberScrapSummary,
    MemberSearchResult,
    UpdateMemberRequest,
)

logger = get_logger(__name__)

WITHDRAWN_MEMBER_MESSAGE = "This member has withdrawn."
PASSWORD_MISMATCH_MESSAGE = "The password does not match."


class MemberField(str, PyEnum):
    """Member fields that carry a uniqueness rule."""

    USER_ID = "user_id"
    NICKNAME = "nickname"


class MemberServiceError(Exception):
    """Base class for member business-rule failures."""


class DuplicateMemberError(MemberServiceError):
    """Raised when a user_id and/or nickname is already taken.

    `conflicts` holds every colliding field, not just the first.
    """

    def __init__(self, conflicts: dict[MemberField, str]):
        self.conflicts = conflicts
        fields = ", ".join(field.value for field in conflicts)
        super().__init__(f"Already in use: {fields}")


class MemberNotFoundError(MemberServiceError):
    """Raised when the referenced member does not exist."""

    def __init__(self, *, user_id: str | None = None, member_id: int | None = None):
        self.user_id = user_id
        self.member_id = member_id
        if user_id is not None:
            super().__init__(f"No member with user_id {user_id!r}")
        else:
            super().__init__(f"No member with id {member_id}")


class WithdrawnMemberError(MemberServiceError):
    """Raised when a withdrawn member tries to authenticate."""

    def __init__(self) -> None:
        super().__init__(WITHDRAWN_MEMBER_MESSAGE)


class PasswordMismatchError(MemberServiceError):
    """Raised when the password does not verify for an active member."""

    def __init__(self) -> None:
        super().__init__(PASSWORD_MISMATCH_MESSAGE)


class MemberService:
    """Identity operations over explicitly supplied collaborators."""

    def __init__(
        self,
        members: MemberRepository,
        posts: PostRepository,
        interactions: InteractionRepository,
        comments: CommentRepository,
        hasher: PasswordHasher,
    ) -> None:
        self._members = members
        self._posts = posts
        self._interactions = interactions
        self._comments = comments
        self._hasher = hasher

    async def create_member(self, request: CreateMemberRequest) -> Member:
        """Register a new active member.

        Raises:
            DuplicateMemberError: If user_id and/or nickname is taken
        """
        await self.check_duplicates(None, request.user_id, request.nickname)

        member = Member(
            user_id=request.user_id,
            nickname=request.nickname,
            password_hash=self._hasher.hash(request.password),
            image_url=request.image_url,
            status=MemberStatus.ACTIVE,
        )
        await self._members.add(member)

        logger.info("member.created", member_id=member.id, user_id=member.user_id)
        return member

    async def check_duplicates(
        self, member: Member | None, user_id: str, nickname: str
    ) -> None:
        """Reject user_id/nickname values already held by another member.

        With no `member` (registration) both fields are checked. With a
        `member` (update) only fields that differ from its current values are
        checked, so keeping your own value is never a collision.

        Raises:
            DuplicateMemberError: Carrying every colliding field
        """
        conflicts: dict[MemberField, str] = {}

        if member is None or member.user_id != user_id:
            if await self._members.get_by_user_id(user_id) is not None:
                conflicts[MemberField.USER_ID] = user_id

        if member is None or member.nickname != nickname:
            if await self._members.get_by_nickname(nickname) is not None:
                conflicts[MemberField.NICKNAME] = nickname

        if conflicts:
            logger.info(
                "member.duplicate.rejected",
                fields=[field.value for field in conflicts],
            )
            raise DuplicateMemberError(conflicts)

    async def login_member(self, request: LoginMemberRequest) -> Member:
        """Authenticate a member by user_id and password.

        Checks run in order and stop at the first failure, so a withdrawn or
        unknown account never reveals whether the password was right.

        Raises:
            MemberNotFoundError: No member has this user_id
            WithdrawnMemberError: The member has withdrawn
            PasswordMismatchError: The password does not verify
        """
        member = await self._members.get_by_user_id(request.user_id)
        if member is None:
            logger.info(
                "member.login.rejected", user_id=request.user_id, reason="not_found"
            )
            raise MemberNotFoundError(user_id=request.user_id)

        if member.is_withdrawn:
            logger.info(
                "member.login.rejected", user_id=request.user_id, reason="withdrawn"
            )
            raise WithdrawnMemberError()

        if not self._hasher.verify(request.password, member.password_hash):
            logger.info(
                "member.login.rejected",
                user_id=request.user_id,
                reason="password_mismatch",
            )
            raise PasswordMismatchError()

        return member

    async def update_member(self, member: Member, request: UpdateMemberRequest) -> None:
        """Overwrite a member's profile. The password is always re-hashed.

        Raises:
            DuplicateMemberError: If a changed user_id/nickname is taken
        """
        await self.check_duplicates(member, request.user_id, request.nickname)

        member.update_profile(
            user_id=request.user_id,
            password_hash=self._hasher.hash(request.password),
            nickname=request.nickname,
            image_url=request.image_url,
        )
        await self._members.add(member)

        logger.info("member.updated", member_id=member.id)

    async def delete_member(self, member: Member) -> None:
        """Withdraw a member (soft delete). Repeating it changes nothing."""
        member.withdraw()
        await self._members.add(member)

        logger.info("member.withdrawn", member_id=member.id)

    async def search_members(self, term: str) -> list[MemberSearchResult]:
        """Members whose nickname contains `term`, as public projections."""
        found = await self._members.search_by_nickname(term)
        return [MemberSearchResult.model_validate(member) for member in found]

    async def get_member_info(self, member: Member) -> MemberInfo:
        """Profile plus post and scrap counts (zero when there are none)."""
        post_count = await self._posts.count_by_member(member.id)
        scrap_count = await self._interactions.count_by_member(
            member.id, InteractionType.SCRAP
        )
        return MemberInfo(
            user_id=member.user_id,
            nickname=member.nickname,
            image_url=member.image_url,
            post_count=post_count,
            scrap_count=scrap_count,
        )

    async def list_member_posts(self, member: Member) -> list[MemberPostSummary]:
        rows = await self._posts.list_summaries_by_member(member.id)
        return [
            MemberPostSummary(post_id=row.id, title=row.title, created_at=row.created_at)
            for row in rows
        ]

    async def list_member_comments(self, member: Member) -> list[MemberCommentSummary]:
        comments = await self._comments.list_by_member(member.id)
        return [
            MemberCommentSummary(
                comment_id=comment.id,
                post_id=comment.post_id,
                content=comment.content,
                created_at=comment.created_at,
            )
            for comment in comments
        ]

    async def list_member_scraps(self, member: Member) -> list[MemberScrapSummary]:
        rows = await self._interactions.list_scraps_by_member(member.id)
        return [
            MemberScrapSummary(
                post_id=row.post_id, title=row.title, scrapped_at=row.scrapped_at
            )
            for row in rows
        ]
