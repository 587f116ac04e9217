"""Input validation run before member and post services are called.

The rules are declared as pydantic constraints on private rule models.
Each validate_* function runs one of them against a request and returns
every violation it finds instead of stopping at the first one. Services
assume their input already passed.
"""

from typing import Annotated, Any, NamedTuple

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    ValidationError,
    field_validator,
)
from pydantic_core import PydanticCustomError

from schemas import (
    CreateMemberRequest,
    CreatePostRequest,
    LoginMemberRequest,
    UpdateMemberRequest,
)

# A letter followed by letters/digits (used for both login id and password)
CREDENTIAL_PATTERN = r"^[A-Za-z][A-Za-z0-9]*$"

CREDENTIAL_MIN_LENGTH = 4
CREDENTIAL_MAX_LENGTH = 20
NICKNAME_MIN_LENGTH = 2
NICKNAME_MAX_LENGTH = 20
IMAGE_URL_MAX_LENGTH = 2048
TITLE_MAX_LENGTH = 100
TAG_MAX_LENGTH = 30

# pydantic error type -> violation code
_ERROR_CODES = {
    "string_too_short": "length",
    "string_too_long": "length",
    "string_pattern_mismatch": "pattern",
    "greater_than": "positive",
}


class FieldViolation(NamedTuple):
    """One failed rule for one input field."""

    field: str
    code: str
    message: str


class ValidationFailedError(Exception):
    """Raised by ensure_valid() when a request breaks one or more rules."""

    def __init__(self, violations: list[FieldViolation]):
        self.violations = violations
        fields = ", ".join(sorted({v.field for v in violations}))
        super().__init__(f"Invalid input for: {fields}")


def ensure_valid(violations: list[FieldViolation]) -> None:
    if violations:
        raise ValidationFailedError(violations)


def _reject_blank(value: Any) -> Any:
    """Runs before length/pattern checks, so blank input reports only 'blank'."""
    if isinstance(value, str) and not value.strip():
        raise PydanticCustomError("blank", "Value must not be blank")
    return value


Credential = Annotated[
    str,
    Field(
        min_length=CREDENTIAL_MIN_LENGTH,
        max_length=CREDENTIAL_MAX_LENGTH,
        pattern=CREDENTIAL_PATTERN,
    ),
]
PositiveId = Annotated[int, Field(gt=0)]
TagName = Annotated[
    str, BeforeValidator(_reject_blank), Field(max_length=TAG_MAX_LENGTH)
]


class _CredentialRules(BaseModel):
    user_id: Credential
    password: Credential

    @field_validator("user_id", "password", mode="before")
    @classmethod
    def not_blank(cls, v: Any) -> Any:
        return _reject_blank(v)


class _MemberRules(_CredentialRules):
    nickname: str = Field(
        min_length=NICKNAME_MIN_LENGTH, max_length=NICKNAME_MAX_LENGTH
    )
    image_url: str | None = Field(default=None, max_length=IMAGE_URL_MAX_LENGTH)

    @field_validator("nickname", mode="before")
    @classmethod
    def nickname_not_blank(cls, v: Any) -> Any:
        return _reject_blank(v)


class _PostRules(BaseModel):
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(min_length=1)
    category_ids: list[PositiveId]
    location_ids: list[PositiveId]
    image_ids: list[PositiveId]
    tags: list[TagName]

    @field_validator("title", "content", mode="before")
    @classmethod
    def not_blank(cls, v: Any) -> Any:
        return _reject_blank(v)


def _collect(rules: type[BaseModel], request: BaseModel) -> list[FieldViolation]:
    try:
        rules.model_validate(request.model_dump())
    except ValidationError as e:
        return [
            FieldViolation(
                str(error["loc"][0]),
                _ERROR_CODES.get(error["type"], error["type"]),
                error["msg"],
            )
            for error in e.errors()
        ]
    return []


def validate_create_member(request: CreateMemberRequest) -> list[FieldViolation]:
    return _collect(_MemberRules, request)


def validate_update_member(request: UpdateMemberRequest) -> list[FieldViolation]:
    # Same rules as registration
    return _collect(_MemberRules, request)


def validate_login(request: LoginMemberRequest) -> list[FieldViolation]:
    return _collect(_CredentialRules, request)


def validate_create_post(request: CreatePostRequest) -> list[FieldViolation]:
    return _collect(_PostRules, request)
