"""
JWT access tokens (python-jose) and argon2 password hashing (passlib).
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jwt
from passlib.context import CryptContext

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    result: bool = pwd_context.verify(plain_password, hashed_password)
    return result


def get_password_hash(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


class JWTAuthAdapter:
    """Auth adapter that signs JWT access tokens and hashes passwords with argon2."""

    def __init__(self, secret_key: str, algorithm: str = ALGORITHM) -> None:
        if not secret_key:
            raise ValueError("A secret key is required to sign tokens")
        self._secret_key = secret_key
        self._algorithm = algorithm

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def create_token(
        self,
        user_id: str,
        ttl_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
        *,
        claims: dict[str, Any] | None = None,
        now_utc: datetime | None = None,
    ) -> str:
        """
        Create a signed access token.

        Args:
            user_id: Stored as the ``sub`` claim
            ttl_minutes: Lifetime of the token
            claims: Extra claims to encode (Optional)
            now_utc: Current UTC time (for testing/determinism)
        """
        current_time = now_utc if now_utc is not None else datetime.now(UTC)
        to_encode: dict[str, Any] = dict(claims or {})
        to_encode.update(
            {
                "sub": str(user_id),
                "iat": current_time,
                "exp": current_time + timedelta(minutes=ttl_minutes),
            }
        )
        encoded_jwt: str = jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)
        return encoded_jwt

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Claims of a valid, unexpired token; ``None`` otherwise."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
            return cast(dict[str, Any], payload)
        except jwt.JWTError:
            return None
