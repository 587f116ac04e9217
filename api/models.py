"""SQLAlchemy models for Trip Share members, posts, and their references."""

from datetime import UTC, datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from core.database import Base


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamp columns."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class MemberStatus(str, PyEnum):
    """Membership state. The only transition is ACTIVE -> WITHDRAWN."""

    ACTIVE = "active"
    WITHDRAWN = "withdrawn"


class Member(TimestampMixin, Base):
    """Registered member identity.

    Withdrawn members stay in the table and keep their user_id and
    nickname reserved.
    """

    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_members_user_id"),
        UniqueConstraint("nickname", name="uq_members_nickname"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(20), nullable=False)
    nickname: Mapped[str] = mapped_column(String(50), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[MemberStatus] = mapped_column(
        Enum(
            MemberStatus,
            name="member_status",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        default=MemberStatus.ACTIVE,
    )

    @property
    def is_withdrawn(self) -> bool:
        return self.status == MemberStatus.WITHDRAWN

    def withdraw(self) -> None:
        self.status = MemberStatus.WITHDRAWN

    def update_profile(
        self,
        *,
        user_id: str,
        password_hash: str,
        nickname: str,
        image_url: str | None,
    ) -> None:
        self.user_id = user_id
        self.password_hash = password_hash
        self.nickname = nickname
        self.image_url = image_url


class Category(Base):
    """Broad classification (region, season, ...) a post can be filed under."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)


class Image(Base):
    __tablename__ = "images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)


post_locations = Table(
    "post_locations",
    Base.metadata,
    Column(
        "post_id",
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "location_id",
        ForeignKey("locations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

post_images = Table(
    "post_images",
    Base.metadata,
    Column(
        "post_id",
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "image_id",
        ForeignKey("images.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Post(TimestampMixin, Base):
    """Aggregate root for published trip content.

    Categories, locations and images are pre-existing rows referenced by id;
    tags are owned by the post and created with it.
    """

    __tablename__ = "posts"
    __table_args__ = (Index("ix_posts_member", "member_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    member: Mapped["Member"] = relationship()
    post_categories: Mapped[list["PostCategory"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostCategory.id",
        lazy="selectin",
    )
    locations: Mapped[list["Location"]] = relationship(
        secondary=post_locations,
        lazy="selectin",
    )
    images: Mapped[list["Image"]] = relationship(
        secondary=post_images,
        lazy="selectin",
    )
    tags: Mapped[list["Tag"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Tag.id",
        lazy="selectin",
    )


class PostCategory(Base):
    """Link between a post and a category. Carries nothing but the link."""

    __tablename__ = "post_categories"
    __table_args__ = (Index("ix_post_categories_post", "post_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
    )

    post: Mapped["Post"] = relationship(back_populates="post_categories")
    category: Mapped["Category"] = relationship(lazy="selectin")


class Tag(Base):
    """Free-text tag owned by a single post."""

    __tablename__ = "tags"
    __table_args__ = (Index("ix_tags_post", "post_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(30), nullable=False)

    post: Mapped["Post"] = relationship(back_populates="tags")


class Comment(Base):
    """Comment left by a member on a post.

    Note: Only has created_at; comment editing is not tracked here.
    """

    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_member", "member_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )


class InteractionType(str, PyEnum):
    """Kind of engagement a member records on a post."""

    SCRAP = "scrap"
    LIKE = "like"


class Interaction(Base):
    """A member's scrap or like on a post (immutable event)."""

    __tablename__ = "interactions"
    __table_args__ = (
        UniqueConstraint(
            "member_id", "post_id", "type", name="uq_interactions_member_post_type"
        ),
        Index("ix_interactions_member_type", "member_id", "type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[InteractionType] = mapped_column(
        Enum(
            InteractionType,
            name="interaction_type",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )
