from datetime import UTC, datetime, timedelta

import pytest

from portfolio.adapters.auth.crypto import JWTAuthAdapter, get_password_hash, verify_password


def test_password_hashing():
    hashed = get_password_hash("correct horse")

    assert hashed != "correct horse"
    assert hashed.startswith("$argon2")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


class TestJWTAuthAdapter:
    def test_token_roundtrip_carries_claims(self):
        adapter = JWTAuthAdapter("secret")
        token = adapter.create_token("user-1", claims={"role": "admin"})

        claims = adapter.decode_token(token)

        assert claims is not None
        assert claims["sub"] == "user-1"
        assert claims["role"] == "admin"

    def test_expired_token_is_rejected(self):
        adapter = JWTAuthAdapter("secret")
        issued = datetime.now(UTC) - timedelta(hours=2)
        token = adapter.create_token("user-1", ttl_minutes=30, now_utc=issued)

        assert adapter.decode_token(token) is None

    def test_foreign_signature_is_rejected(self):
        token = JWTAuthAdapter("one").create_token("user-1")
        assert JWTAuthAdapter("two").decode_token(token) is None

    def test_garbage_is_rejected(self):
        assert JWTAuthAdapter("secret").decode_token("not-a-jwt") is None

    def test_requires_secret(self):
        with pytest.raises(ValueError):
            JWTAuthAdapter("")
