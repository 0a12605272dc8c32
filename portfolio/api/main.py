import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio.adapters.sqlite.migrator import SQLiteMigrator
from portfolio.api.deps import build_container, get_settings
from portfolio.api.errors import register_error_handlers
from portfolio.api.middleware import RequestLoggingMiddleware
from portfolio.app_shell.config import validate_ops_rules
from portfolio.rules.loader import load_rules

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules, check env and migrate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules)
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
        container = build_container(settings, rules)
        logger.info("Rules loaded from %s; database at %s", settings.rules_path, settings.db_path)
    except Exception as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    app.state.container = container
    yield
    container.close()


app = FastAPI(
    title="Portfolio API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

register_error_handlers(app)

# --- Routers ---
from portfolio.api.routes import (  # noqa: E402
    admin_newsletter,
    analytics,
    auth,
    blog,
    contact,
    dashboard,
    media,
    newsletter,
    projects,
    testimonials,
)
from portfolio.api.routes import settings as site_settings  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(blog.router, prefix="/api/blog", tags=["Blog"])
app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
app.include_router(newsletter.router, prefix="/api/newsletter", tags=["Newsletter"])
app.include_router(
    admin_newsletter.router, prefix="/api/admin/newsletter", tags=["Admin Newsletter"]
)
app.include_router(contact.router, prefix="/api/contact", tags=["Contact"])
app.include_router(testimonials.router, prefix="/api/testimonials", tags=["Testimonials"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(dashboard.router, prefix="/api/admin/dashboard", tags=["Admin Dashboard"])
app.include_router(site_settings.router, prefix="/api/settings", tags=["Settings"])
app.include_router(media.router, prefix="/api/media", tags=["Media"])


# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
