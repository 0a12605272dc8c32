from datetime import datetime
from typing import Any, Protocol

from portfolio.domain.entities import User


class UserRepoPort(Protocol):
    def get_by_email(self, email: str) -> User | None: ...
    def get_by_id(self, user_id: str) -> User | None: ...
    def insert(self, user: User) -> User: ...
    def touch_last_login(self, user_id: str, when: datetime) -> None: ...


class AuthAdapterPort(Protocol):
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def hash_password(self, plain: str) -> str: ...
    def create_token(
        self,
        user_id: str,
        ttl_minutes: int = ...,
        *,
        claims: dict[str, Any] | None = None,
        now_utc: datetime | None = None,
    ) -> str: ...
    def decode_token(self, token: str) -> dict[str, Any] | None: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
