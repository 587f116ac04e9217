"""Pydantic schemas for service inputs and read projections.

Field rules (lengths, patterns) are not declared here; they live in
services/validation.py and run before a service is called.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateMemberRequest(BaseModel):
    """Registration input."""

    user_id: str
    nickname: str
    password: str
    image_url: str | None = None


class UpdateMemberRequest(BaseModel):
    """Profile update input. The password is always re-hashed."""

    user_id: str
    nickname: str
    password: str
    image_url: str | None = None


class LoginMemberRequest(BaseModel):
    user_id: str
    password: str


class CreatePostRequest(BaseModel):
    """Post creation input. Referenced ids that do not exist are dropped."""

    title: str
    content: str
    category_ids: list[int] = Field(default_factory=list)
    location_ids: list[int] = Field(default_factory=list)
    image_ids: list[int] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class MemberSearchResult(BaseModel):
    """Public projection for member search - no credentials or user_id."""

    model_config = ConfigDict(from_attributes=True)

    nickname: str
    image_url: str | None = None


class MemberInfo(BaseModel):
    """Profile summary with activity counts."""

    user_id: str
    nickname: str
    image_url: str | None = None
    post_count: int = 0
    scrap_count: int = 0


class MemberPostSummary(BaseModel):
    post_id: int
    title: str
    created_at: datetime


class MemberCommentSummary(BaseModel):
    comment_id: int
    post_id: int
    content: str
    created_at: datetime


class MemberScrapSummary(BaseModel):
    post_id: int
    title: str
    scrapped_at: datetime
