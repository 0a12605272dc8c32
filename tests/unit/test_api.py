"""
HTTP-level tests for the public and admin endpoints.

The app's container is swapped for one built over a temporary database via
dependency overrides, so the lifespan (env checks, migrations) is not run.
"""

from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from portfolio.api.deps import AppContainer, get_container
from portfolio.api.main import app
from portfolio.components.auth import CreateAdminInput, run_create_admin

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"

BLOG_BODY: dict[str, Any] = {
    "title": "Hello, World!",
    "content": "Some words about the first post. " * 10,
    "excerpt": "The very first post on this site, with a proper excerpt.",
    "category": "General",
    "tags": ["Intro", "meta"],
    "status": "published",
}

PROJECT_BODY: dict[str, Any] = {
    "title": "Portfolio Site",
    "description": "A personal website with a blog, project gallery and newsletter. " * 3,
    "short_description": "Personal site with a blog, a project gallery and a newsletter.",
    "technologies": ["Python", "FastAPI"],
    "category": "web",
    "start_date": "2025-01-01",
    "github_url": "https://github.com/example/portfolio",
}


@pytest.fixture
def client(container: AppContainer) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_container] = lambda: container
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(container: AppContainer) -> dict[str, str]:
    out = run_create_admin(
        CreateAdminInput(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, name="Site Admin"),
        container.users,
        container.auth_adapter,
        container.clock,
    )
    token = container.auth_adapter.create_token(out.user.id)
    return {"Authorization": f"Bearer {token}"}


def create_blog(client: TestClient, headers: dict[str, str], **overrides: Any) -> dict[str, Any]:
    response = client.post("/api/blog", json={**BLOG_BODY, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "api"}


def test_request_id_header(client):
    response = client.get("/health", headers={"x-request-id": "abc"})
    assert response.headers["x-request-id"] == "abc"


# --- Auth ---


class TestAuth:
    def test_login_sets_cookie_and_me_works(self, client, admin_headers):
        response = client.post(
            "/api/auth/login", data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "admin"
        assert "password_hash" not in data["user"]
        assert "access_token" in response.cookies

        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["data"]["email"] == ADMIN_EMAIL

        client.post("/api/auth/logout")
        client.cookies.clear()
        assert client.get("/api/auth/me").status_code == 401

    def test_wrong_password(self, client, admin_headers):
        response = client.post(
            "/api/auth/login", data={"username": ADMIN_EMAIL, "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_verify_requires_admin(self, client, admin_headers):
        assert client.get("/api/auth/verify").status_code == 401
        assert client.get("/api/auth/verify", headers=admin_headers).status_code == 200

    def test_invalid_token_is_anonymous(self, client):
        response = client.get("/api/auth/verify", headers={"Authorization": "Bearer junk"})
        assert response.status_code == 401


# --- Blog ---


class TestBlogEndpoints:
    def test_create_requires_admin(self, client):
        response = client.post("/api/blog", json=BLOG_BODY)
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authenticated"}

    def test_create_derives_fields(self, client, admin_headers):
        blog = create_blog(client, admin_headers)

        assert blog["slug"] == "hello-world"
        assert blog["url"] == "/blog/hello-world"
        assert blog["category"] == "general"
        assert blog["tags"] == ["intro", "meta"]
        assert blog["read_time"] == 1
        assert blog["published_at"] is not None
        assert blog["seo"]["meta_title"] == "Hello, World!"

    def test_duplicate_slug_is_conflict(self, client, admin_headers):
        create_blog(client, admin_headers)
        response = client.post(
            "/api/blog", json={**BLOG_BODY, "title": "hello -- world!!"}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_validation_names_field(self, client, admin_headers):
        response = client.post(
            "/api/blog", json={**BLOG_BODY, "title": "Hi"}, headers=admin_headers
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "title"

    def test_public_visibility(self, client, admin_headers):
        create_blog(client, admin_headers)
        draft = create_blog(
            client, admin_headers, title="Work In Progress", status="draft"
        )

        public = client.get("/api/blog").json()
        assert public["pagination"]["total"] == 1
        assert "content" not in public["data"][0]

        admin = client.get("/api/blog", headers=admin_headers).json()
        assert admin["pagination"]["total"] == 2

        assert client.get(f"/api/blog/{draft['slug']}").status_code == 404
        assert client.get(f"/api/blog/{draft['id']}", headers=admin_headers).status_code == 200

    def test_public_get_counts_a_view(self, client, admin_headers, container):
        blog = create_blog(client, admin_headers)

        response = client.get("/api/blog/hello-world", headers={"user-agent": "Mozilla/5.0"})
        assert response.status_code == 200
        assert response.json()["data"]["content"].startswith("Some words")

        assert container.blogs.get_by_id(blog["id"]).views == 1

        client.get("/api/blog/hello-world", headers=admin_headers)
        assert container.blogs.get_by_id(blog["id"]).views == 1

    def test_update_with_stale_version(self, client, admin_headers):
        blog = create_blog(client, admin_headers)

        ok = client.put(
            f"/api/blog/{blog['id']}?expected_version=0",
            json={"title": "Hello Again, World"},
            headers=admin_headers,
        )
        assert ok.status_code == 200
        assert ok.json()["data"]["slug"] == "hello-again-world"
        assert ok.json()["data"]["published_at"] == blog["published_at"]

        stale = client.put(
            f"/api/blog/{blog['id']}?expected_version=0",
            json={"title": "Lost Update Here"},
            headers=admin_headers,
        )
        assert stale.status_code == 409

    def test_bad_sort_is_rejected(self, client):
        response = client.get("/api/blog?sort=password_hash")
        assert response.status_code == 400
        assert response.json()["error"] == "sort"

    def test_delete(self, client, admin_headers):
        blog = create_blog(client, admin_headers)
        assert client.delete(f"/api/blog/{blog['id']}", headers=admin_headers).status_code == 200
        assert client.delete(f"/api/blog/{blog['id']}", headers=admin_headers).status_code == 404


# --- Projects ---


class TestProjectEndpoints:
    def test_planning_project_is_public(self, client, admin_headers):
        response = client.post("/api/projects", json=PROJECT_BODY, headers=admin_headers)
        assert response.status_code == 201
        project = response.json()["data"]
        assert project["seo"]["keywords"] == ["python", "fastapi", "web"]

        listed = client.get("/api/projects?technology=FastAPI").json()
        assert [p["slug"] for p in listed["data"]] == ["portfolio-site"]

    def test_end_date_before_start(self, client, admin_headers):
        response = client.post(
            "/api/projects",
            json={**PROJECT_BODY, "end_date": "2024-12-31"},
            headers=admin_headers,
        )
        assert response.status_code == 400


# --- Newsletter ---


class TestNewsletter:
    def test_subscribe_lifecycle(self, client, container, admin_headers):
        first = client.post("/api/newsletter", json={"email": "Reader@Example.com"})
        assert first.status_code == 201
        sub = first.json()["data"]
        assert sub["email"] == "reader@example.com"
        assert sub["status"] == "active"
        assert container.email.get_emails_to("reader@example.com")

        again = client.post("/api/newsletter", json={"email": "reader@example.com"})
        assert again.status_code == 409

        gone = client.get(f"/api/newsletter/unsubscribe?id={sub['id']}")
        assert gone.status_code == 200
        assert gone.json()["data"]["status"] == "unsubscribed"

        twice = client.post("/api/newsletter/unsubscribe", json={"email": "reader@example.com"})
        assert twice.status_code == 200
        assert twice.json()["message"] == "You are already unsubscribed"

        back = client.post("/api/newsletter", json={"email": "reader@example.com"})
        assert back.status_code == 200
        assert back.json()["data"]["unsubscribed_at"] is None

    def test_unsubscribe_reveals_nothing_about_the_subscriber(self, client):
        client.post(
            "/api/newsletter",
            json={"email": "private@example.com", "name": "Private Person"},
        )

        response = client.post(
            "/api/newsletter/unsubscribe", json={"email": "private@example.com"}
        )

        assert response.status_code == 200
        assert response.json()["data"] == {
            "email": "private@example.com",
            "status": "unsubscribed",
        }
        assert "Private Person" not in response.text

        by_id = client.get("/api/newsletter/unsubscribe?id=" + "0" * 32)
        assert by_id.status_code == 404

    def test_invalid_email(self, client):
        response = client.post("/api/newsletter", json={"email": "not-an-email"})
        assert response.status_code == 400
        assert response.json()["error"] == "email"

    def test_admin_bounce_blocks_public_resubscribe(self, client, admin_headers):
        sub = client.post("/api/newsletter", json={"email": "b@example.com"}).json()["data"]

        bounced = client.put(
            f"/api/admin/newsletter/subscribers/{sub['id']}",
            json={"status": "bounced"},
            headers=admin_headers,
        )
        assert bounced.status_code == 200

        client.post("/api/newsletter/unsubscribe", json={"email": "b@example.com"})
        response = client.post("/api/newsletter", json={"email": "b@example.com"})
        assert response.status_code == 409

    def test_admin_listing_stats_and_export(self, client, admin_headers):
        client.post("/api/newsletter", json={"email": "one@example.com", "name": "One"})
        client.post("/api/newsletter", json={"email": "two@example.com", "source": "blog"})

        assert client.get("/api/admin/newsletter/subscribers").status_code == 401

        listed = client.get(
            "/api/admin/newsletter/subscribers?source=blog", headers=admin_headers
        ).json()
        assert [s["email"] for s in listed["data"]] == ["two@example.com"]

        stats = client.get("/api/admin/newsletter/stats", headers=admin_headers).json()
        assert stats["data"]["total"] == 2
        assert stats["data"]["active"] == 2

        export = client.get("/api/admin/newsletter/subscribers/export/csv", headers=admin_headers)
        assert export.status_code == 200
        assert export.headers["content-type"].startswith("text/csv")
        lines = export.text.strip().splitlines()
        assert lines[0] == "email,name,status,source,subscribed_at,unsubscribed_at"
        assert len(lines) == 3


# --- Contact ---


class TestContact:
    def test_submit_notifies_owner_and_sender(self, client, container):
        response = client.post(
            "/api/contact",
            json={
                "name": "Jane Doe",
                "email": "jane@example.com",
                "subject": "Project inquiry",
                "message": "I would like to discuss a website project with you.",
                "source": "linkedin",
            },
        )
        assert response.status_code == 201
        contact = container.contacts.get_by_id(response.json()["data"]["id"])
        assert contact.source == "website"

        assert container.email.get_emails_to("owner@example.com")
        assert container.email.get_emails_to("jane@example.com")

    def test_admin_triage(self, client, admin_headers):
        created = client.post(
            "/api/contact",
            json={
                "name": "Jane Doe",
                "email": "jane@example.com",
                "subject": "Project inquiry",
                "message": "I would like to discuss a website project with you.",
            },
        ).json()["data"]

        assert client.get("/api/contact").status_code == 401

        updated = client.put(
            f"/api/contact/{created['id']}",
            json={"status": "read", "priority": "high"},
            headers=admin_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["priority"] == "high"

        listed = client.get("/api/contact?status=read", headers=admin_headers).json()
        assert listed["pagination"]["total"] == 1


# --- Testimonials ---


class TestTestimonialEndpoints:
    BODY = {
        "name": "Ann Client",
        "email": "ann@example.com",
        "company": "Acme",
        "position": "CTO",
        "content": "Delivered on time and the site is fast. Would hire again.",
        "rating": 5,
        "status": "approved",
    }

    def test_public_submission_waits_for_review(self, client, admin_headers):
        response = client.post("/api/testimonials", json=self.BODY)
        assert response.status_code == 201
        testimonial = response.json()["data"]
        assert testimonial["status"] == "pending"
        assert "email" not in testimonial
        assert testimonial["full_title"] == "CTO at Acme"

        assert client.get("/api/testimonials").json()["pagination"]["total"] == 0
        assert client.get(f"/api/testimonials/{testimonial['id']}").status_code == 404

        approved = client.put(
            f"/api/testimonials/{testimonial['id']}",
            json={"status": "approved"},
            headers=admin_headers,
        )
        assert approved.status_code == 200
        assert approved.json()["data"]["email"] == "ann@example.com"

        public = client.get("/api/testimonials").json()
        assert public["pagination"]["total"] == 1
        assert "email" not in public["data"][0]

    def test_rating_out_of_range(self, client):
        response = client.post("/api/testimonials", json={**self.BODY, "rating": 6})
        assert response.status_code == 400
        assert response.json()["error"] == "rating"


# --- Analytics & Dashboard ---


class TestAnalyticsEndpoints:
    def test_track_and_summarize(self, client, admin_headers):
        response = client.post(
            "/api/analytics",
            json={"event_type": "page_view", "path": "/", "session_id": "s1"},
            headers={
                "user-agent": "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) "
                "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
            },
        )
        assert response.status_code == 201
        assert response.json()["data"]["id"]

        assert client.get("/api/analytics").status_code == 401

        summary = client.get("/api/analytics?period=7d", headers=admin_headers).json()["data"]
        assert summary["overview"]["page_views"] == 1
        assert summary["overview"]["unique_visitors"] == 1
        assert summary["top_pages"] == [{"path": "/", "views": 1}]
        assert summary["device_stats"] == [{"device": "mobile", "count": 1}]

    def test_unknown_event_type(self, client):
        response = client.post("/api/analytics", json={"event_type": "hover", "path": "/"})
        assert response.status_code == 400
        assert response.json()["error"] == "event_type"


def test_dashboard(client, admin_headers):
    create_blog(client, admin_headers)
    client.post("/api/analytics", json={"event_type": "page_view", "path": "/"})

    assert client.get("/api/admin/dashboard").status_code == 401

    data = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]
    assert data["stats"]["blogs"]["published"] == 1
    assert data["stats"]["analytics"]["total_page_views"] == 1
    assert data["recent_activity"][0]["type"] == "blog"


# --- Settings & Media ---


class TestSettingsEndpoints:
    def test_first_read_creates_defaults(self, client, container):
        response = client.get("/api/settings")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["site_name"] == container.settings.site_name
        assert data["contact_email"] == "owner@example.com"
        assert data["full_site_title"] == data["seo"]["meta_title"]
        assert container.site_settings.get() is not None

    def test_admin_update_merges_sections(self, client, admin_headers):
        assert client.put("/api/settings", json={"site_name": "Jane"}).status_code == 401

        response = client.put(
            "/api/settings",
            json={"theme": {"dark_mode": True}, "maintenance": {"allowed_ips": ["10.0.0.1"]}},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert data["theme"] == {
            "primary_color": "#3b82f6",
            "secondary_color": "#64748b",
            "dark_mode": True,
        }
        assert data["maintenance"]["allowed_ips"] == ["10.0.0.1"]
        assert data["version"] == 1

        public = client.get("/api/settings").json()["data"]
        assert public["theme"]["dark_mode"] is True
        assert "allowed_ips" not in public["maintenance"]

    def test_invalid_update_rejected(self, client, admin_headers):
        response = client.put("/api/settings", json={"site_name": None}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "site_name"

        response = client.put(
            "/api/settings",
            json={"social_media": {"twitter": "https://example.com/me"}},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "social_media.twitter"

    def test_stale_version_conflicts(self, client, admin_headers):
        client.put("/api/settings", json={"site_name": "Jane"}, headers=admin_headers)
        response = client.put(
            "/api/settings?expected_version=0", json={"site_name": "Janet"}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_reset(self, client, admin_headers):
        client.put(
            "/api/settings", json={"features": {"blog_enabled": False}}, headers=admin_headers
        )
        assert client.post("/api/settings/reset").status_code == 401

        response = client.post("/api/settings/reset", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["features"]["blog_enabled"] is True


PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def upload(client, headers, name="logo.png", content=PNG, content_type="image/png", **form):
    return client.post(
        "/api/media",
        files={"file": (name, content, content_type)},
        data=form,
        headers=headers,
    )


class TestMediaEndpoints:
    def test_upload_serve_list_delete(self, client, admin_headers):
        response = upload(client, admin_headers, folder="brand", description="Logo")
        assert response.status_code == 201, response.text
        media = response.json()["data"]
        assert media["category"] == "image"
        assert media["folder"] == "brand"
        assert media["url"].startswith("/api/media/files/brand/")

        served = client.get(media["url"])
        assert served.status_code == 200
        assert served.content == PNG
        assert served.headers["content-type"] == "image/png"

        listing = client.get("/api/media", headers=admin_headers).json()
        assert [f["id"] for f in listing["data"]["files"]] == [media["id"]]
        assert listing["data"]["stats"] == {"total": 1, "images": 1, "documents": 0, "others": 0}
        assert listing["pagination"]["total"] == 1

        assert client.delete(f"/api/media/{media['id']}", headers=admin_headers).status_code == 200
        assert client.get(media["url"]).status_code == 404

    def test_admin_only(self, client):
        assert upload(client, {}).status_code == 401
        assert client.get("/api/media").status_code == 401
        assert client.delete("/api/media/" + "0" * 32).status_code == 401

    def test_disallowed_type(self, client, admin_headers):
        response = upload(
            client, admin_headers, name="page.html", content=b"<p>", content_type="text/html"
        )
        assert response.status_code == 400
        assert response.json()["error"] == "content_type"

    def test_oversized_file(self, client, container, admin_headers):
        media_rules = container.rules.media.model_copy(update={"max_size_bytes": 16})
        container.rules = container.rules.model_copy(update={"media": media_rules})

        response = upload(client, admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "file"
        assert client.get("/api/media", headers=admin_headers).json()["data"]["files"] == []

    def test_unknown_file(self, client):
        assert client.get("/api/media/files/uploads/nothing.png").status_code == 404
