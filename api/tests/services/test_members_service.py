"""Tests for members_service module.

Tests cover:
- check_duplicates collecting every colliding field
- create_member hashing and staging an active member
- login_member check order (existence -> withdrawal -> password)
- update_member keeping own identifiers and re-hashing the password
- delete_member soft deletion
- read views (search, info counts, own posts/comments/scraps)
"""

from datetime import UTC, datetime
from unittest.mock import create_autospec

import pytest
from structlog.testing import capture_logs

from core.security import PasswordHasher
from models import InteractionType, Member, MemberStatus
from repositories.comment_repository import CommentRepository
from repositories.interaction_repository import InteractionRepository, ScrapRow
from repositories.member_repository import MemberRepository
from repositories.post_repository import PostRepository, PostSummaryRow
from schemas import CreateMemberRequest, LoginMemberRequest, UpdateMemberRequest
from services.members_service import (
    DuplicateMemberError,
    MemberField,
    MemberNotFoundError,
    MemberService,
    PasswordMismatchError,
    WithdrawnMemberError,
)
from tests.factories import CommentFactory, MemberFactory, WithdrawnMemberFactory

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def members() -> MemberRepository:
    repo = create_autospec(MemberRepository, instance=True)
    repo.get_by_user_id.return_value = None
    repo.get_by_nickname.return_value = None
    repo.add.side_effect = lambda member: member
    return repo


@pytest.fixture
def posts() -> PostRepository:
    return create_autospec(PostRepository, instance=True)


@pytest.fixture
def interactions() -> InteractionRepository:
    return create_autospec(InteractionRepository, instance=True)


@pytest.fixture
def comments() -> CommentRepository:
    return create_autospec(CommentRepository, instance=True)


@pytest.fixture
def fake_hasher() -> PasswordHasher:
    hasher = create_autospec(PasswordHasher, instance=True)
    hasher.hash.side_effect = lambda plain: f"hashed:{plain}"
    hasher.verify.side_effect = lambda plain, digest: digest == f"hashed:{plain}"
    return hasher


@pytest.fixture
def service(members, posts, interactions, comments, fake_hasher) -> MemberService:
    return MemberService(members, posts, interactions, comments, fake_hasher)


def _create_request(**overrides) -> CreateMemberRequest:
    fields = {
        "user_id": "tripper1",
        "nickname": "Wanderer",
        "password": "secret123",
        "image_url": None,
    }
    fields.update(overrides)
    return CreateMemberRequest(**fields)


# ---------------------------------------------------------------------------
# check_duplicates
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestCheckDuplicates:
    async def test_no_conflicts_passes(self, service, members):
        await service.check_duplicates(None, "tripper1", "Wanderer")

        members.get_by_user_id.assert_awaited_once_with("tripper1")
        members.get_by_nickname.assert_awaited_once_with("Wanderer")

    async def test_user_id_conflict_only(self, service, members):
        members.get_by_user_id.return_value = MemberFactory.build()

        with pytest.raises(DuplicateMemberError) as exc_info:
            await service.check_duplicates(None, "tripper1", "Wanderer")

        assert exc_info.value.conflicts == {MemberField.USER_ID: "tripper1"}

    async def test_nickname_conflict_only(self, service, members):
        members.get_by_nickname.return_value = MemberFactory.build()

        with pytest.raises(DuplicateMemberError) as exc_info:
            await service.check_duplicates(None, "tripper1", "Wanderer")

        assert exc_info.value.conflicts == {MemberField.NICKNAME: "Wanderer"}

    async def test_reports_both_conflicts_together(self, service, members):
        members.get_by_user_id.return_value = MemberFactory.build()
        members.get_by_nickname.return_value = MemberFactory.build()

        with pytest.raises(DuplicateMemberError) as exc_info:
            await service.check_duplicates(None, "tripper1", "Wanderer")

        assert set(exc_info.value.conflicts) == {
            MemberField.USER_ID,
            MemberField.NICKNAME,
        }

    async def test_unchanged_fields_are_not_checked(self, service, members):
        current = MemberFactory.build(user_id="tripper1", nickname="Wanderer")

        await service.check_duplicates(current, "tripper1", "Wanderer")

        members.get_by_user_id.assert_not_awaited()
        members.get_by_nickname.assert_not_awaited()

    async def test_changed_field_is_checked(self, service, members):
        current = MemberFactory.build(user_id="tripper1", nickname="Wanderer")
        members.get_by_nickname.return_value = MemberFactory.build()

        with pytest.raises(DuplicateMemberError) as exc_info:
            await service.check_duplicates(current, "tripper1", "Taken")

        assert exc_info.value.conflicts == {MemberField.NICKNAME: "Taken"}
        members.get_by_user_id.assert_not_awaited()


# ---------------------------------------------------------------------------
# create_member
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestCreateMember:
    async def test_creates_active_member_with_hashed_password(
        self, service, members
    ):
        member = await service.create_member(
            _create_request(image_url="https://img.example.com/a.png")
        )

        assert member.user_id == "tripper1"
        assert member.nickname == "Wanderer"
        assert member.password_hash == "hashed:secret123"
        assert member.image_url == "https://img.example.com/a.png"
        assert member.status == MemberStatus.ACTIVE
        members.add.assert_awaited_once_with(member)

    async def test_duplicate_stages_nothing(self, service, members):
        members.get_by_user_id.return_value = MemberFactory.build()

        with pytest.raises(DuplicateMemberError):
            await service.create_member(_create_request())

        members.add.assert_not_awaited()


# ---------------------------------------------------------------------------
# login_member
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestLoginMember:
    async def test_success_returns_member(self, service, members):
        stored = MemberFactory.build(password_hash="hashed:secret123")
        members.get_by_user_id.return_value = stored

        result = await service.login_member(
            LoginMemberRequest(user_id=stored.user_id, password="secret123")
        )

        assert result is stored

    async def test_unknown_user_id(self, service):
        with pytest.raises(MemberNotFoundError) as exc_info:
            await service.login_member(
                LoginMemberRequest(user_id="nobody1", password="secret123")
            )

        assert exc_info.value.user_id == "nobody1"

    async def test_withdrawn_checked_before_password(
        self, service, members, fake_hasher
    ):
        members.get_by_user_id.return_value = WithdrawnMemberFactory.build(
            password_hash="hashed:secret123"
        )

        with pytest.raises(WithdrawnMemberError):
            await service.login_member(
                LoginMemberRequest(user_id="gone1", password="wrongpass1")
            )

        fake_hasher.verify.assert_not_called()

    async def test_wrong_password(self, service, members):
        members.get_by_user_id.return_value = MemberFactory.build(
            password_hash="hashed:secret123"
        )

        with pytest.raises(PasswordMismatchError):
            await service.login_member(
                LoginMemberRequest(user_id="tripper1", password="wrongpass1")
            )

    async def test_rejection_is_logged(self, service, members):
        members.get_by_user_id.return_value = WithdrawnMemberFactory.build()

        with capture_logs() as logs, pytest.raises(WithdrawnMemberError):
            await service.login_member(
                LoginMemberRequest(user_id="gone1", password="secret123")
            )

        rejected = [e for e in logs if e["event"] == "member.login.rejected"]
        assert rejected[0]["reason"] == "withdrawn"


# ---------------------------------------------------------------------------
# update_member / delete_member
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestUpdateMember:
    async def test_overwrites_profile_and_rehashes(self, service, members):
        member = MemberFactory.build(
            id=1,
            user_id="tripper1",
            nickname="Wanderer",
            password_hash="hashed:oldpass1",
            image_url="https://img.example.com/old.png",
        )

        await service.update_member(
            member,
            UpdateMemberRequest(
                user_id="tripper2",
                nickname="Voyager",
                password="newpass1",
                image_url=None,
            ),
        )

        assert member.user_id == "tripper2"
        assert member.nickname == "Voyager"
        assert member.password_hash == "hashed:newpass1"
        assert member.image_url is None
        members.add.assert_awaited_once_with(member)

    async def test_same_password_is_hashed_again(self, service, fake_hasher):
        member = MemberFactory.build(user_id="tripper1", nickname="Wanderer")

        await service.update_member(
            member,
            UpdateMemberRequest(
                user_id="tripper1", nickname="Wanderer", password="secret123"
            ),
        )

        fake_hasher.hash.assert_called_once_with("secret123")

    async def test_duplicate_leaves_member_untouched(self, service, members):
        member = MemberFactory.build(user_id="tripper1", nickname="Wanderer")
        members.get_by_user_id.return_value = MemberFactory.build()

        with pytest.raises(DuplicateMemberError):
            await service.update_member(
                member,
                UpdateMemberRequest(
                    user_id="takenId1", nickname="Wanderer", password="secret123"
                ),
            )

        assert member.user_id == "tripper1"
        members.add.assert_not_awaited()


@pytest.mark.unit
class TestDeleteMember:
    async def test_withdraws_member(self, service, members):
        member = MemberFactory.build()

        await service.delete_member(member)

        assert member.status == MemberStatus.WITHDRAWN
        assert member.is_withdrawn is True
        members.add.assert_awaited_once_with(member)

    async def test_repeat_is_harmless(self, service):
        member = WithdrawnMemberFactory.build()

        await service.delete_member(member)

        assert member.status == MemberStatus.WITHDRAWN


# ---------------------------------------------------------------------------
# Read views
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestReadViews:
    async def test_search_projects_public_fields(self, service, members):
        members.search_by_nickname.return_value = [
            MemberFactory.build(nickname="bigTrip", image_url=None),
            MemberFactory.build(nickname="seaTrip", image_url="https://i/x.png"),
        ]

        results = await service.search_members("Trip")

        assert [(r.nickname, r.image_url) for r in results] == [
            ("bigTrip", None),
            ("seaTrip", "https://i/x.png"),
        ]
        assert not hasattr(results[0], "user_id")
        members.search_by_nickname.assert_awaited_once_with("Trip")

    async def test_member_info_counts(self, service, posts, interactions):
        member = MemberFactory.build(id=7, user_id="tripper1", nickname="Wanderer")
        posts.count_by_member.return_value = 3
        interactions.count_by_member.return_value = 2

        info = await service.get_member_info(member)

        assert info.user_id == "tripper1"
        assert info.post_count == 3
        assert info.scrap_count == 2
        interactions.count_by_member.assert_awaited_once_with(
            7, InteractionType.SCRAP
        )

    async def test_list_member_posts(self, service, posts):
        posts.list_summaries_by_member.return_value = [
            PostSummaryRow(id=2, title="Andes", created_at=NOW),
        ]

        result = await service.list_member_posts(MemberFactory.build(id=7))

        assert [(p.post_id, p.title) for p in result] == [(2, "Andes")]

    async def test_list_member_comments(self, service, comments):
        comments.list_by_member.return_value = [
            CommentFactory.build(id=4, post_id=2, member_id=7, content="Nice!")
        ]

        result = await service.list_member_comments(MemberFactory.build(id=7))

        assert result[0].comment_id == 4
        assert result[0].post_id == 2
        assert result[0].content == "Nice!"

    async def test_list_member_scraps(self, service, interactions):
        interactions.list_scraps_by_member.return_value = [
            ScrapRow(post_id=9, title="Alps", scrapped_at=NOW)
        ]

        result = await service.list_member_scraps(MemberFactory.build(id=7))

        assert result[0].post_id == 9
        assert result[0].scrapped_at == NOW


@pytest.mark.unit
class TestMemberModel:
    def test_withdraw_marks_member_withdrawn(self):
        member = Member(
            user_id="a1234", nickname="ab", password_hash="x", status=MemberStatus.ACTIVE
        )
        assert member.is_withdrawn is False
        member.withdraw()
        assert member.is_withdrawn is True
