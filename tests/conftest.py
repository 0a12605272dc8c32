from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest

from portfolio.adapters.sqlite.migrator import SQLiteMigrator
from portfolio.api.deps import AppContainer, Settings, build_container
from portfolio.rules.loader import load_rules
from portfolio.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent
MIGRATIONS_DIR = str(PROJECT_ROOT / "migrations")
RULES_PATH = PROJECT_ROOT / "rules.yaml"

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class FixedClock:
    """TimePort pinned to a settable instant."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def now_utc(self) -> datetime:
        return self.now


@pytest.fixture
def rules() -> Rules:
    return load_rules(RULES_PATH)


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """Path of a freshly migrated SQLite database."""
    path = str(tmp_path / "portfolio.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def container(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    rules: Rules,
    db_path: str,
) -> Generator[AppContainer, None, None]:
    """Full adapter graph over a temporary database and the dev email adapter."""
    monkeypatch.setenv("PORTFOLIO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PORTFOLIO_SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("EMAIL_PROVIDER", "dev")
    monkeypatch.setenv("ADMIN_EMAIL", "owner@example.com")
    monkeypatch.delenv("PORTFOLIO_MEDIA_DIR", raising=False)

    settings = Settings()
    assert settings.db_path == db_path

    c = build_container(settings, rules)
    yield c
    c.close()
