import sqlite3
from pathlib import Path

import pytest

from portfolio.adapters.sqlite.migrator import SQLiteMigrator

MIGRATIONS_DIR = str(Path(__file__).parent.parent.parent / "migrations")

EXPECTED_TABLES = {
    "users",
    "blogs",
    "projects",
    "subscribers",
    "analytics_events",
    "contacts",
    "testimonials",
    "site_settings",
    "media",
}


@pytest.fixture
def temp_db_path(tmp_path):
    return str(tmp_path / "test_db.sqlite")


def _tables(db_path: str) -> set[str]:
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        return {r[0] for r in rows}
    finally:
        conn.close()


def test_migrator_creates_schema(temp_db_path):
    applied = SQLiteMigrator(temp_db_path, MIGRATIONS_DIR).run_migrations()

    assert applied == ["0001_initial.sql", "0002_settings_media.sql"]
    tables = _tables(temp_db_path)
    assert EXPECTED_TABLES <= tables
    assert "_migrations" in tables


def test_migrator_is_idempotent(temp_db_path):
    migrator = SQLiteMigrator(temp_db_path, MIGRATIONS_DIR)

    migrator.run_migrations()
    assert migrator.run_migrations() == []

    conn = sqlite3.connect(temp_db_path)
    count = conn.execute("SELECT COUNT(*) FROM _migrations").fetchone()[0]
    conn.close()
    assert count == 2


def test_missing_migrations_dir(temp_db_path, tmp_path):
    migrator = SQLiteMigrator(temp_db_path, str(tmp_path / "nope"))
    with pytest.raises(FileNotFoundError):
        migrator.run_migrations()


def test_settings_table_holds_one_row(temp_db_path):
    SQLiteMigrator(temp_db_path, MIGRATIONS_DIR).run_migrations()

    conn = sqlite3.connect(temp_db_path)
    try:
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO site_settings (id, data_json, created_at, updated_at) "
                "VALUES (2, '{}', '2026-01-01', '2026-01-01')"
            )
    finally:
        conn.close()
