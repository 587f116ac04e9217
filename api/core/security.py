"""Password hashing backed by passlib's CryptContext."""

from collections.abc import Sequence

from passlib.context import CryptContext

from core.config import Settings


class PasswordHasher:
    """One-way hash + verify for member passwords.

    The scheme list is configurable; the first scheme hashes new passwords
    and the rest are still accepted by verify().
    """

    def __init__(
        self,
        schemes: Sequence[str] = ("bcrypt",),
        *,
        bcrypt_rounds: int = 12,
    ) -> None:
        options: dict[str, object] = {}
        if "bcrypt" in schemes:
            options["bcrypt__rounds"] = bcrypt_rounds
        self._context = CryptContext(
            schemes=list(schemes), deprecated="auto", **options
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(settings.password_schemes, bcrypt_rounds=settings.bcrypt_rounds)

    def hash(self, plain_password: str) -> str:
        return self._context.hash(plain_password)

    def verify(self, plain_password: str, password_hash: str) -> bool:
        return self._context.verify(plain_password, password_hash)
