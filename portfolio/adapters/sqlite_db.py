"""
SQLite database adapter.

Implements the component repository ports on top of the schema in
``migrations/``. Sticks to standard SQL so the queries port to Postgres.

Conventions:
- Datetimes are stored as UTC ISO-8601 strings with microseconds, so
  string comparison matches chronological order
- Lists and nested objects are stored as JSON text in ``*_json`` columns
- Versioned updates use ``WHERE id = ? AND version = ?``; zero rows
  affected means a concurrent writer won (StaleWriteError)
- Unique constraint violations surface as DuplicateKeyError
"""

from __future__ import annotations

import json
import re
import sqlite3
from datetime import UTC, date, datetime
from typing import Any

from portfolio.components.analytics.models import DailyStat, SummaryQuery
from portfolio.components.contact.models import ContactQuery
from portfolio.components.content.models import ContentQuery
from portfolio.components.dashboard.models import RecentRecord
from portfolio.components.media.models import MediaQuery
from portfolio.components.newsletter.models import SubscriberFilter, SubscriberQuery
from portfolio.components.testimonials.models import TestimonialQuery
from portfolio.domain.entities import (
    AnalyticsEvent,
    BlogPost,
    ContactMessage,
    MediaFile,
    Project,
    Seo,
    SiteSettings,
    Subscriber,
    SubscriberPreferences,
    Testimonial,
    User,
)
from portfolio.domain.errors import DuplicateKeyError, StaleWriteError
from portfolio.domain.pagination import PageRequest

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------

_UNIQUE_FAILED = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def to_db_dt(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="microseconds")


def parse_dt(s: str | None) -> datetime | None:
    """Parse ISO datetime string; naive values are taken as UTC."""
    if not s:
        return None
    dt = datetime.fromisoformat(s)
    return dt if dt.tzinfo else dt.replace(tzinfo=UTC)


def parse_date(s: str | None) -> date | None:
    return date.fromisoformat(s) if s else None


def like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def json_item_pattern(value: str) -> str:
    """LIKE pattern matching one string element of a JSON array column."""
    return like_pattern(json.dumps(value))


def duplicate_key(exc: sqlite3.IntegrityError) -> DuplicateKeyError | None:
    """DuplicateKeyError for a UNIQUE violation, None for any other integrity error."""
    match = _UNIQUE_FAILED.search(str(exc))
    return DuplicateKeyError(match.group(1)) if match else None


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    table: str = ""
    # Allowed sort keys mapped to their column
    sort_columns: dict[str, str] = {"created_at": "created_at"}

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    # --- shared statements ---

    def _fetch_one(self, sql: str, params: tuple[Any, ...] | list[Any]) -> dict[str, Any] | None:
        conn = self._get_conn()
        try:
            row: dict[str, Any] | None = conn.execute(sql, params).fetchone()
            return row
        finally:
            if self._should_close():
                conn.close()

    def _fetch_all(self, sql: str, params: tuple[Any, ...] | list[Any]) -> list[dict[str, Any]]:
        conn = self._get_conn()
        try:
            rows: list[dict[str, Any]] = conn.execute(sql, params).fetchall()
            return rows
        finally:
            if self._should_close():
                conn.close()

    def _write(self, sql: str, params: tuple[Any, ...] | list[Any]) -> int:
        """Execute one write statement and return the affected row count."""
        conn = self._get_conn()
        try:
            try:
                cursor = conn.execute(sql, params)
            except sqlite3.IntegrityError as e:
                dup = duplicate_key(e)
                if dup is None:
                    raise
                raise dup from e
            if self._should_close():
                conn.commit()
            return cursor.rowcount
        finally:
            if self._should_close():
                conn.close()

    def _insert_row(self, row: dict[str, Any]) -> None:
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        self._write(
            f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
            list(row.values()),
        )

    def _update_row(self, row: dict[str, Any], expected_version: int) -> None:
        assignments = ", ".join(f"{col} = ?" for col in row if col != "id")
        params = [v for col, v in row.items() if col != "id"]
        affected = self._write(
            f"UPDATE {self.table} SET {assignments} WHERE id = ? AND version = ?",
            [*params, row["id"], expected_version],
        )
        if affected == 0:
            raise StaleWriteError(row["id"], expected_version)

    def _delete_row(self, row_id: str) -> bool:
        return self._write(f"DELETE FROM {self.table} WHERE id = ?", (row_id,)) > 0

    def _get_row(self, row_id: str) -> dict[str, Any] | None:
        return self._fetch_one(f"SELECT * FROM {self.table} WHERE id = ?", (row_id,))

    def _page(
        self,
        conditions: list[str],
        params: list[Any],
        page: PageRequest,
    ) -> tuple[list[dict[str, Any]], int]:
        """Run a filtered count and the matching page in one connection."""
        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        column = self.sort_columns.get(page.sort, "created_at")
        direction = "ASC" if page.order == "asc" else "DESC"

        conn = self._get_conn()
        try:
            total_row = conn.execute(
                f"SELECT COUNT(*) AS n FROM {self.table}{where}", params
            ).fetchone()
            rows = conn.execute(
                f"SELECT * FROM {self.table}{where} "
                f"ORDER BY {column} {direction}, id {direction} LIMIT ? OFFSET ?",
                [*params, page.limit, page.offset],
            ).fetchall()
            return rows, total_row["n"] if total_row else 0
        finally:
            if self._should_close():
                conn.close()


# -----------------------------------------------------------------------------
# Content Repositories
# -----------------------------------------------------------------------------


class _SQLiteContentRepo(SQLiteRepoBase):
    """Shared persistence for blog posts and projects."""

    search_columns: tuple[str, ...] = ("title",)
    # Maintained by atomic increments, never written back from a read copy
    counter_columns: tuple[str, ...] = ("views", "likes")

    def _map_row(self, row: dict[str, Any]) -> Any:
        raise NotImplementedError

    def _to_row(self, doc: Any) -> dict[str, Any]:
        raise NotImplementedError

    def get_by_id(self, doc_id: str) -> Any:
        row = self._get_row(doc_id)
        return self._map_row(row) if row else None

    def get_by_slug(self, slug: str) -> Any:
        row = self._fetch_one(f"SELECT * FROM {self.table} WHERE slug = ?", (slug,))
        return self._map_row(row) if row else None

    def insert(self, doc: Any) -> Any:
        self._insert_row(self._to_row(doc))
        return doc

    def update(self, doc: Any, expected_version: int) -> Any:
        row = {k: v for k, v in self._to_row(doc).items() if k not in self.counter_columns}
        self._update_row(row, expected_version)
        return self.get_by_id(doc.id)

    def delete(self, doc_id: str) -> bool:
        return self._delete_row(doc_id)

    def increment_views(self, doc_id: str) -> None:
        self._write(f"UPDATE {self.table} SET views = views + 1 WHERE id = ?", (doc_id,))

    def _filter_conditions(self, query: ContentQuery) -> tuple[list[str], list[Any]]:
        conditions: list[str] = []
        params: list[Any] = []
        f = query.filters

        vis = query.visibility
        if not vis.unrestricted:
            statuses = sorted(vis.statuses or ())
            conditions.append(f"status IN ({', '.join('?' for _ in statuses)})")
            params.extend(statuses)
            conditions.append("published_at IS NOT NULL AND published_at <= ?")
            params.append(to_db_dt(vis.published_before))

        if f.status:
            conditions.append("status = ?")
            params.append(f.status)
        if f.category:
            conditions.append("category = ?")
            params.append(f.category.lower())
        if f.search:
            pattern = like_pattern(f.search)
            conditions.append(
                "(" + " OR ".join(f"{c} LIKE ? ESCAPE '\\'" for c in self.search_columns) + ")"
            )
            params.extend(pattern for _ in self.search_columns)
        return conditions, params

    def list(self, query: ContentQuery) -> tuple[list[Any], int]:
        conditions, params = self._filter_conditions(query)
        rows, total = self._page(conditions, params, query.page)
        return [self._map_row(r) for r in rows], total


class SQLiteBlogRepo(_SQLiteContentRepo):
    """SQLite implementation of ContentRepoPort for blog posts."""

    table = "blogs"
    search_columns = ("title", "excerpt", "content", "tags_json", "category")
    sort_columns = {
        "created_at": "created_at",
        "updated_at": "updated_at",
        "published_at": "published_at",
        "title": "title",
        "views": "views",
        "likes": "likes",
    }

    def _filter_conditions(self, query: ContentQuery) -> tuple[list[str], list[Any]]:
        conditions, params = super()._filter_conditions(query)
        if query.filters.tag:
            # Tags are stored lowercased as a JSON array of strings
            conditions.append("tags_json LIKE ? ESCAPE '\\'")
            params.append(json_item_pattern(query.filters.tag.lower()))
        return conditions, params

    def _to_row(self, doc: BlogPost) -> dict[str, Any]:
        return {
            "id": doc.id,
            "title": doc.title,
            "slug": doc.slug,
            "content": doc.content,
            "excerpt": doc.excerpt,
            "featured_image": doc.featured_image,
            "tags_json": json.dumps(doc.tags),
            "category": doc.category,
            "status": doc.status,
            "author": doc.author,
            "published_at": to_db_dt(doc.published_at),
            "read_time": doc.read_time,
            "views": doc.views,
            "likes": doc.likes,
            "seo_json": doc.seo.model_dump_json(),
            "created_at": to_db_dt(doc.created_at),
            "updated_at": to_db_dt(doc.updated_at),
            "version": doc.version,
        }

    def _map_row(self, row: dict[str, Any]) -> BlogPost:
        return BlogPost(
            id=row["id"],
            title=row["title"],
            slug=row["slug"],
            content=row["content"],
            excerpt=row["excerpt"],
            featured_image=row["featured_image"],
            tags=json.loads(row["tags_json"]),
            category=row["category"],
            status=row["status"],
            author=row["author"],
            published_at=parse_dt(row["published_at"]),
            read_time=row["read_time"],
            views=row["views"],
            likes=row["likes"],
            seo=Seo.model_validate_json(row["seo_json"]),
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
            version=row["version"],
        )


class SQLiteProjectRepo(_SQLiteContentRepo):
    """SQLite implementation of ContentRepoPort for projects."""

    table = "projects"
    search_columns = (
        "title",
        "description",
        "short_description",
        "technologies_json",
        "category",
    )
    sort_columns = {
        "created_at": "created_at",
        "updated_at": "updated_at",
        "start_date": "start_date",
        "title": "title",
        "order": "sort_order",
        "views": "views",
    }

    def _filter_conditions(self, query: ContentQuery) -> tuple[list[str], list[Any]]:
        conditions, params = super()._filter_conditions(query)
        f = query.filters
        if f.technology:
            # LIKE is case-insensitive for ASCII, technologies keep their casing
            conditions.append("technologies_json LIKE ? ESCAPE '\\'")
            params.append(json_item_pattern(f.technology))
        if f.featured is not None:
            conditions.append("featured = ?")
            params.append(int(f.featured))
        return conditions, params

    def _to_row(self, doc: Project) -> dict[str, Any]:
        return {
            "id": doc.id,
            "title": doc.title,
            "slug": doc.slug,
            "description": doc.description,
            "short_description": doc.short_description,
            "featured_image": doc.featured_image,
            "images_json": json.dumps(doc.images),
            "technologies_json": json.dumps(doc.technologies),
            "category": doc.category,
            "status": doc.status,
            "github_url": doc.github_url,
            "live_url": doc.live_url,
            "demo_url": doc.demo_url,
            "start_date": doc.start_date.isoformat(),
            "end_date": doc.end_date.isoformat() if doc.end_date else None,
            "featured": int(doc.featured),
            "sort_order": doc.order,
            "published_at": to_db_dt(doc.published_at),
            "views": doc.views,
            "seo_json": doc.seo.model_dump_json(),
            "created_at": to_db_dt(doc.created_at),
            "updated_at": to_db_dt(doc.updated_at),
            "version": doc.version,
        }

    def _map_row(self, row: dict[str, Any]) -> Project:
        return Project(
            id=row["id"],
            title=row["title"],
            slug=row["slug"],
            description=row["description"],
            short_description=row["short_description"],
            featured_image=row["featured_image"],
            images=json.loads(row["images_json"]),
            technologies=json.loads(row["technologies_json"]),
            category=row["category"],
            status=row["status"],
            github_url=row["github_url"],
            live_url=row["live_url"],
            demo_url=row["demo_url"],
            start_date=parse_date(row["start_date"]),
            end_date=parse_date(row["end_date"]),
            featured=bool(row["featured"]),
            order=row["sort_order"],
            published_at=parse_dt(row["published_at"]),
            views=row["views"],
            seo=Seo.model_validate_json(row["seo_json"]),
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
            version=row["version"],
        )


# -----------------------------------------------------------------------------
# Subscriber Repository
# -----------------------------------------------------------------------------


class SQLiteSubscriberRepo(SQLiteRepoBase):
    """SQLite implementation of SubscriberRepoPort."""

    table = "subscribers"
    sort_columns = {
        "created_at": "created_at",
        "subscribed_at": "subscribed_at",
        "email": "email",
        "name": "name",
        "status": "status",
    }

    def get_by_id(self, subscriber_id: str) -> Subscriber | None:
        row = self._get_row(subscriber_id)
        return self._map_row(row) if row else None

    def get_by_email(self, email: str) -> Subscriber | None:
        # Column is COLLATE NOCASE
        row = self._fetch_one("SELECT * FROM subscribers WHERE email = ?", (email.strip(),))
        return self._map_row(row) if row else None

    def insert(self, subscriber: Subscriber) -> Subscriber:
        self._insert_row(self._to_row(subscriber))
        return subscriber

    def update(self, subscriber: Subscriber, expected_version: int) -> Subscriber:
        self._update_row(self._to_row(subscriber), expected_version)
        return subscriber

    def delete(self, subscriber_id: str) -> bool:
        return self._delete_row(subscriber_id)

    def _conditions(self, filters: SubscriberFilter) -> tuple[list[str], list[Any]]:
        conditions: list[str] = []
        params: list[Any] = []
        if filters.status:
            conditions.append("status = ?")
            params.append(filters.status)
        if filters.source:
            conditions.append("source = ?")
            params.append(filters.source)
        if filters.search:
            conditions.append("(email LIKE ? ESCAPE '\\' OR name LIKE ? ESCAPE '\\')")
            params.extend([like_pattern(filters.search)] * 2)
        return conditions, params

    def list(self, query: SubscriberQuery) -> tuple[list[Subscriber], int]:
        conditions, params = self._conditions(query.filters)
        rows, total = self._page(conditions, params, query.page)
        return [self._map_row(r) for r in rows], total

    def list_all(self, filters: SubscriberFilter) -> list[Subscriber]:
        conditions, params = self._conditions(filters)
        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = self._fetch_all(
            f"SELECT * FROM subscribers{where} ORDER BY created_at DESC, id DESC", params
        )
        return [self._map_row(r) for r in rows]

    def count_by_status(self) -> dict[str, int]:
        rows = self._fetch_all(
            "SELECT status, COUNT(*) AS n FROM subscribers GROUP BY status", ()
        )
        return {r["status"]: r["n"] for r in rows}

    def count_subscribed_since(self, since: datetime) -> int:
        row = self._fetch_one(
            "SELECT COUNT(*) AS n FROM subscribers WHERE subscribed_at >= ?",
            (to_db_dt(since),),
        )
        return row["n"] if row else 0

    def _to_row(self, sub: Subscriber) -> dict[str, Any]:
        return {
            "id": sub.id,
            "email": sub.email,
            "name": sub.name,
            "status": sub.status,
            "source": sub.source,
            "preferences_json": sub.preferences.model_dump_json(),
            "subscribed_at": to_db_dt(sub.subscribed_at),
            "unsubscribed_at": to_db_dt(sub.unsubscribed_at),
            "created_at": to_db_dt(sub.created_at),
            "updated_at": to_db_dt(sub.updated_at),
            "version": sub.version,
        }

    def _map_row(self, row: dict[str, Any]) -> Subscriber:
        return Subscriber(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            status=row["status"],
            source=row["source"],
            preferences=SubscriberPreferences.model_validate_json(row["preferences_json"]),
            subscribed_at=parse_dt(row["subscribed_at"]),
            unsubscribed_at=parse_dt(row["unsubscribed_at"]),
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
            version=row["version"],
        )


# -----------------------------------------------------------------------------
# Analytics Repository
# -----------------------------------------------------------------------------


class SQLiteAnalyticsRepo(SQLiteRepoBase):
    """Append-only event store; implements both AnalyticsSinkPort and AnalyticsQueryPort."""

    table = "analytics_events"

    def record(self, event: AnalyticsEvent) -> None:
        self._insert_row(
            {
                "id": event.id,
                "event_type": event.event_type,
                "path": event.path,
                "referrer": event.referrer,
                "user_agent": event.user_agent,
                "ip_address": event.ip_address,
                "device": event.device,
                "browser": event.browser,
                "os": event.os,
                "session_id": event.session_id,
                "metadata_json": json.dumps(event.metadata, default=str),
                "timestamp": to_db_dt(event.timestamp),
            }
        )

    def _window(self, query: SummaryQuery) -> tuple[str, list[Any]]:
        where = "timestamp >= ? AND timestamp <= ?"
        params: list[Any] = [to_db_dt(query.start), to_db_dt(query.end)]
        if query.event_type:
            where += " AND event_type = ?"
            params.append(query.event_type)
        if query.path:
            where += " AND path = ?"
            params.append(query.path)
        return where, params

    def count_events(self, query: SummaryQuery) -> int:
        where, params = self._window(query)
        row = self._fetch_one(f"SELECT COUNT(*) AS n FROM analytics_events WHERE {where}", params)
        return row["n"] if row else 0

    def count_sessions(self, query: SummaryQuery) -> int:
        where, params = self._window(query)
        row = self._fetch_one(
            f"SELECT COUNT(DISTINCT session_id) AS n FROM analytics_events "
            f"WHERE {where} AND session_id IS NOT NULL",
            params,
        )
        return row["n"] if row else 0

    def top_values(
        self, query: SummaryQuery, column: str, limit: int = 10
    ) -> list[tuple[str, int]]:
        if column not in ("path", "referrer", "device", "browser", "os"):
            raise ValueError(f"Cannot group analytics by '{column}'")
        where, params = self._window(query)
        rows = self._fetch_all(
            f"SELECT {column} AS value, COUNT(*) AS n FROM analytics_events "
            f"WHERE {where} AND {column} IS NOT NULL AND {column} != '' "
            f"GROUP BY {column} ORDER BY n DESC, {column} ASC LIMIT ?",
            [*params, limit],
        )
        return [(r["value"], r["n"]) for r in rows]

    def daily_stats(self, query: SummaryQuery) -> list[DailyStat]:
        where, params = self._window(query)
        rows = self._fetch_all(
            f"""
            SELECT substr(timestamp, 1, 10) AS day,
                   COUNT(*) AS total,
                   SUM(CASE WHEN event_type = 'page_view' THEN 1 ELSE 0 END) AS page_views,
                   COUNT(DISTINCT session_id) AS visitors
            FROM analytics_events
            WHERE {where}
            GROUP BY day
            ORDER BY day ASC
            """,
            params,
        )
        return [
            DailyStat(
                date=r["day"],
                total_events=r["total"],
                page_views=r["page_views"] or 0,
                unique_visitors=r["visitors"],
            )
            for r in rows
        ]


# -----------------------------------------------------------------------------
# Contact & Testimonial Repositories
# -----------------------------------------------------------------------------


class SQLiteContactRepo(SQLiteRepoBase):
    """SQLite implementation of ContactRepoPort."""

    table = "contacts"
    sort_columns = {
        "created_at": "created_at",
        "updated_at": "updated_at",
        "status": "status",
        "priority": "priority",
        "name": "name",
        "email": "email",
        "subject": "subject",
    }

    def get_by_id(self, contact_id: str) -> ContactMessage | None:
        row = self._get_row(contact_id)
        return ContactMessage.model_validate(row) if row else None

    def insert(self, contact: ContactMessage) -> ContactMessage:
        self._insert_row(self._to_row(contact))
        return contact

    def update(self, contact: ContactMessage, expected_version: int) -> ContactMessage:
        self._update_row(self._to_row(contact), expected_version)
        return contact

    def delete(self, contact_id: str) -> bool:
        return self._delete_row(contact_id)

    def list(self, query: ContactQuery) -> tuple[list[ContactMessage], int]:
        f = query.filters
        conditions: list[str] = []
        params: list[Any] = []
        for column in ("status", "priority", "source"):
            value = getattr(f, column)
            if value:
                conditions.append(f"{column} = ?")
                params.append(value)
        if f.search:
            conditions.append(
                "(name LIKE ? ESCAPE '\\' OR email LIKE ? ESCAPE '\\' "
                "OR subject LIKE ? ESCAPE '\\' OR message LIKE ? ESCAPE '\\')"
            )
            params.extend([like_pattern(f.search)] * 4)
        rows, total = self._page(conditions, params, query.page)
        return [ContactMessage.model_validate(r) for r in rows], total

    def _to_row(self, contact: ContactMessage) -> dict[str, Any]:
        row = contact.model_dump()
        row["created_at"] = to_db_dt(contact.created_at)
        row["updated_at"] = to_db_dt(contact.updated_at)
        return row


class SQLiteTestimonialRepo(SQLiteRepoBase):
    """SQLite implementation of TestimonialRepoPort."""

    table = "testimonials"
    sort_columns = {
        "created_at": "created_at",
        "updated_at": "updated_at",
        "rating": "rating",
        "order": "sort_order",
        "name": "name",
    }

    def get_by_id(self, testimonial_id: str):
        row = self._get_row(testimonial_id)
        return self._map_row(row) if row else None

    def insert(self, testimonial):
        self._insert_row(self._to_row(testimonial))
        return testimonial

    def update(self, testimonial, expected_version: int):
        self._update_row(self._to_row(testimonial), expected_version)
        return testimonial

    def delete(self, testimonial_id: str) -> bool:
        return self._delete_row(testimonial_id)

    def list(self, query: TestimonialQuery):
        f = query.filters
        conditions: list[str] = []
        params: list[Any] = []
        if query.visible_statuses is not None:
            statuses = sorted(query.visible_statuses)
            conditions.append(f"status IN ({', '.join('?' for _ in statuses)})")
            params.extend(statuses)
        if f.status:
            conditions.append("status = ?")
            params.append(f.status)
        if f.featured is not None:
            conditions.append("featured = ?")
            params.append(int(f.featured))
        if f.search:
            conditions.append(
                "(name LIKE ? ESCAPE '\\' OR company LIKE ? ESCAPE '\\' "
                "OR content LIKE ? ESCAPE '\\')"
            )
            params.extend([like_pattern(f.search)] * 3)
        rows, total = self._page(conditions, params, query.page)
        return [self._map_row(r) for r in rows], total

    def _to_row(self, t: Testimonial) -> dict[str, Any]:
        row = t.model_dump()
        row["sort_order"] = row.pop("order")
        row["featured"] = int(t.featured)
        row["created_at"] = to_db_dt(t.created_at)
        row["updated_at"] = to_db_dt(t.updated_at)
        return row

    def _map_row(self, row: dict[str, Any]) -> Testimonial:
        data = dict(row)
        data["order"] = data.pop("sort_order")
        data["featured"] = bool(data["featured"])
        return Testimonial.model_validate(data)


# -----------------------------------------------------------------------------
# Settings Repository
# -----------------------------------------------------------------------------


class SQLiteSettingsRepo(SQLiteRepoBase):
    """SQLite implementation of SettingsRepoPort. The table holds at most one row."""

    table = "site_settings"
    ROW_ID = 1

    def get(self) -> SiteSettings | None:
        row = self._fetch_one("SELECT * FROM site_settings WHERE id = ?", (self.ROW_ID,))
        return self._map_row(row) if row else None

    def insert(self, settings: SiteSettings) -> SiteSettings:
        self._insert_row(self._to_row(settings))
        return settings

    def update(self, settings: SiteSettings, expected_version: int) -> SiteSettings:
        self._update_row(self._to_row(settings), expected_version)
        return settings

    def _to_row(self, s: SiteSettings) -> dict[str, Any]:
        return {
            "id": self.ROW_ID,
            "data_json": s.model_dump_json(exclude={"created_at", "updated_at", "version"}),
            "created_at": to_db_dt(s.created_at),
            "updated_at": to_db_dt(s.updated_at),
            "version": s.version,
        }

    def _map_row(self, row: dict[str, Any]) -> SiteSettings:
        data = json.loads(row["data_json"])
        data["created_at"] = parse_dt(row["created_at"])
        data["updated_at"] = parse_dt(row["updated_at"])
        data["version"] = row["version"]
        return SiteSettings.model_validate(data)


# -----------------------------------------------------------------------------
# Media Repository
# -----------------------------------------------------------------------------


class SQLiteMediaRepo(SQLiteRepoBase):
    """SQLite implementation of MediaRepoPort (metadata only; bytes live in storage)."""

    table = "media"
    sort_columns = {
        "created_at": "created_at",
        "filename": "filename",
        "size_bytes": "size_bytes",
    }

    def insert(self, media: MediaFile) -> MediaFile:
        self._insert_row(self._to_row(media))
        return media

    def get_by_id(self, media_id: str) -> MediaFile | None:
        row = self._get_row(media_id)
        return self._map_row(row) if row else None

    def get_by_key(self, key: str) -> MediaFile | None:
        row = self._fetch_one("SELECT * FROM media WHERE storage_key = ?", (key,))
        return self._map_row(row) if row else None

    def delete(self, media_id: str) -> bool:
        return self._delete_row(media_id)

    def list(self, query: MediaQuery) -> tuple[list[MediaFile], int]:
        f = query.filters
        conditions: list[str] = []
        params: list[Any] = []
        if f.category:
            conditions.append("category = ?")
            params.append(f.category)
        if f.folder:
            conditions.append("folder = ?")
            params.append(f.folder)
        rows, total = self._page(conditions, params, query.page)
        return [self._map_row(r) for r in rows], total

    def count_by_category(self) -> dict[str, int]:
        rows = self._fetch_all("SELECT category, COUNT(*) AS n FROM media GROUP BY category", ())
        return {r["category"]: r["n"] for r in rows}

    def _to_row(self, m: MediaFile) -> dict[str, Any]:
        row = m.model_dump()
        row["storage_key"] = row.pop("key")
        row["created_at"] = to_db_dt(m.created_at)
        return row

    def _map_row(self, row: dict[str, Any]) -> MediaFile:
        data = dict(row)
        data["key"] = data.pop("storage_key")
        data["created_at"] = parse_dt(data["created_at"])
        return MediaFile.model_validate(data)


# -----------------------------------------------------------------------------
# User Repository
# -----------------------------------------------------------------------------


class SQLiteUserRepo(SQLiteRepoBase):
    """SQLite implementation of UserRepoPort."""

    table = "users"

    def get_by_id(self, user_id: str) -> User | None:
        row = self._get_row(user_id)
        return self._map_row(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        row = self._fetch_one("SELECT * FROM users WHERE email = ?", (email.strip(),))
        return self._map_row(row) if row else None

    def insert(self, user: User) -> User:
        self._insert_row(
            {
                "id": user.id,
                "email": user.email,
                "name": user.name,
                "password_hash": user.password_hash,
                "role": user.role,
                "is_active": int(user.is_active),
                "last_login": to_db_dt(user.last_login),
                "created_at": to_db_dt(user.created_at),
                "updated_at": to_db_dt(user.updated_at),
            }
        )
        return user

    def touch_last_login(self, user_id: str, when: datetime) -> None:
        self._write(
            "UPDATE users SET last_login = ? WHERE id = ?",
            (to_db_dt(when), user_id),
        )

    def count_admins(self) -> int:
        row = self._fetch_one("SELECT COUNT(*) AS n FROM users WHERE role = 'admin'", ())
        return row["n"] if row else 0

    def _map_row(self, row: dict[str, Any]) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            password_hash=row["password_hash"],
            role=row["role"],
            is_active=bool(row["is_active"]),
            last_login=parse_dt(row["last_login"]),
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
        )


# -----------------------------------------------------------------------------
# Dashboard Repository
# -----------------------------------------------------------------------------


class SQLiteDashboardRepo(SQLiteRepoBase):
    """Read-only aggregates for the admin dashboard."""

    TABLES = frozenset({"blogs", "projects", "contacts", "testimonials", "subscribers"})
    COUNTERS = frozenset({("blogs", "views"), ("blogs", "likes"), ("projects", "views")})

    # (title column, detail column) per table
    RECENT_COLUMNS: dict[str, tuple[str, str]] = {
        "blogs": ("title", "''"),
        "projects": ("title", "''"),
        "contacts": ("name", "subject"),
        "testimonials": ("name", "content"),
        "subscribers": ("email", "source"),
    }

    def _check_table(self, entity: str) -> None:
        if entity not in self.TABLES:
            raise ValueError(f"Unknown dashboard entity: {entity}")

    def status_counts(self, entity: str) -> dict[str, int]:
        self._check_table(entity)
        rows = self._fetch_all(f"SELECT status, COUNT(*) AS n FROM {entity} GROUP BY status", ())
        return {r["status"]: r["n"] for r in rows}

    def column_total(self, entity: str, column: str) -> int:
        if (entity, column) not in self.COUNTERS:
            raise ValueError(f"Unknown counter: {entity}.{column}")
        row = self._fetch_one(f"SELECT COALESCE(SUM({column}), 0) AS n FROM {entity}", ())
        return row["n"] if row else 0

    def recent(self, entity: str, limit: int) -> list[RecentRecord]:
        self._check_table(entity)
        title_col, detail_col = self.RECENT_COLUMNS[entity]
        rows = self._fetch_all(
            f"SELECT id, status, created_at, {title_col} AS title, {detail_col} AS detail "
            f"FROM {entity} ORDER BY created_at DESC LIMIT ?",
            (limit,),
        )
        return [
            RecentRecord(
                id=r["id"],
                status=r["status"],
                created_at=parse_dt(r["created_at"]) or datetime.min.replace(tzinfo=UTC),
                title=r["title"],
                detail=r["detail"] or "",
            )
            for r in rows
        ]

    def page_view_stats(self) -> tuple[int, int]:
        row = self._fetch_one(
            "SELECT COUNT(*) AS views, COUNT(DISTINCT ip_address) AS visitors "
            "FROM analytics_events WHERE event_type = 'page_view'",
            (),
        )
        if not row:
            return 0, 0
        return row["views"], row["visitors"]
