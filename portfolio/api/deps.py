import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from portfolio.adapters.auth.crypto import JWTAuthAdapter
from portfolio.adapters.clock import SystemClock
from portfolio.adapters.dev_email import DevEmailAdapter
from portfolio.adapters.local_storage import LocalFileStorage
from portfolio.adapters.sendgrid_email import SendGridEmailAdapter
from portfolio.adapters.sqlite_db import (
    SQLiteAnalyticsRepo,
    SQLiteBlogRepo,
    SQLiteContactRepo,
    SQLiteDashboardRepo,
    SQLiteMediaRepo,
    SQLiteProjectRepo,
    SQLiteSettingsRepo,
    SQLiteSubscriberRepo,
    SQLiteTestimonialRepo,
    SQLiteUserRepo,
)
from portfolio.components.analytics.models import RequestMeta
from portfolio.components.auth import ResolvePrincipalInput, run_resolve_principal
from portfolio.components.dispatch import DispatcherConfig, SideEffectDispatcher
from portfolio.components.media import MediaLimits
from portfolio.components.settings import SettingsDefaults
from portfolio.core.ports.email import EmailAddress, EmailPort
from portfolio.core.services.notifications import SiteInfo
from portfolio.domain.derived import DerivationSettings
from portfolio.domain.entities import Principal
from portfolio.domain.errors import ForbiddenError, UnauthorizedError
from portfolio.rules.loader import load_rules
from portfolio.rules.models import Rules

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("PORTFOLIO_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "portfolio.db")
        self.rules_path = Path(os.environ.get("PORTFOLIO_RULES_PATH", "rules.yaml"))
        self.migrations_dir = str(self.base_dir / "migrations")
        self.secret_key = os.environ.get("PORTFOLIO_SECRET_KEY", "")
        self.site_url = os.environ.get("SITE_URL", "http://localhost:3000")
        self.site_name = os.environ.get("SITE_NAME", "Portfolio")
        self.admin_email = os.environ.get("ADMIN_EMAIL") or None
        self.email_provider = os.environ.get("EMAIL_PROVIDER", "dev")
        self.sendgrid_api_key = os.environ.get("SENDGRID_API_KEY", "")
        self.email_from = os.environ.get("EMAIL_FROM", "noreply@example.com")
        self.google_analytics_id = os.environ.get("GOOGLE_ANALYTICS_ID", "")
        self.media_dir = Path(os.environ.get("PORTFOLIO_MEDIA_DIR") or self.data_dir / "media")
        self.cors_origins = [
            o.strip()
            for o in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",")
            if o.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Container ---
@dataclass
class AppContainer:
    """Process-wide adapters, built once in the app lifespan."""

    settings: Settings
    rules: Rules
    clock: SystemClock
    dispatcher: SideEffectDispatcher
    auth_adapter: JWTAuthAdapter
    email: EmailPort
    site: SiteInfo
    blogs: SQLiteBlogRepo
    projects: SQLiteProjectRepo
    subscribers: SQLiteSubscriberRepo
    analytics: SQLiteAnalyticsRepo
    contacts: SQLiteContactRepo
    testimonials: SQLiteTestimonialRepo
    users: SQLiteUserRepo
    dashboard: SQLiteDashboardRepo
    site_settings: SQLiteSettingsRepo
    media: SQLiteMediaRepo
    storage: LocalFileStorage

    @property
    def derivation(self) -> DerivationSettings:
        content = self.rules.content
        return DerivationSettings(
            words_per_minute=content.words_per_minute,
            meta_title_max=content.seo.meta_title_max,
            meta_description_max=content.seo.meta_description_max,
        )

    @property
    def settings_defaults(self) -> SettingsDefaults:
        s = self.settings
        return SettingsDefaults(
            site_name=s.site_name,
            site_url=s.site_url,
            contact_email=s.admin_email or SettingsDefaults.contact_email,
            from_name=s.site_name,
            from_email=s.email_from,
            google_analytics_id=s.google_analytics_id,
        )

    @property
    def media_limits(self) -> MediaLimits:
        return MediaLimits.from_rules(self.rules.media)

    def content_repo(self, kind: str) -> SQLiteBlogRepo | SQLiteProjectRepo:
        return self.blogs if kind == "blog" else self.projects

    def sort_fields(self, kind: str) -> list[str]:
        content = self.rules.content
        return content.blog_sort_fields if kind == "blog" else content.project_sort_fields

    def close(self) -> None:
        self.dispatcher.shutdown(wait_for_tasks=True)
        close = getattr(self.email, "close", None)
        if close is not None:
            close()


def build_email_adapter(settings: Settings) -> EmailPort:
    if settings.email_provider == "sendgrid":
        return SendGridEmailAdapter(
            settings.sendgrid_api_key,
            EmailAddress(email=settings.email_from, name=settings.site_name),
        )
    if settings.email_provider != "dev":
        raise ValueError(f"Unknown EMAIL_PROVIDER: {settings.email_provider}")
    return DevEmailAdapter()


def build_container(settings: Settings, rules: Rules | None = None) -> AppContainer:
    rules = rules or load_rules(settings.rules_path)
    if not settings.secret_key:
        raise ValueError("PORTFOLIO_SECRET_KEY must be set")

    db = settings.db_path
    return AppContainer(
        settings=settings,
        rules=rules,
        clock=SystemClock(),
        dispatcher=SideEffectDispatcher(
            DispatcherConfig(
                budget_seconds=rules.dispatch.budget_seconds,
                max_workers=rules.dispatch.max_workers,
            )
        ),
        auth_adapter=JWTAuthAdapter(settings.secret_key),
        email=build_email_adapter(settings),
        site=SiteInfo(
            name=settings.site_name,
            url=settings.site_url,
            admin_email=settings.admin_email,
        ),
        blogs=SQLiteBlogRepo(db),
        projects=SQLiteProjectRepo(db),
        subscribers=SQLiteSubscriberRepo(db),
        analytics=SQLiteAnalyticsRepo(db),
        contacts=SQLiteContactRepo(db),
        testimonials=SQLiteTestimonialRepo(db),
        users=SQLiteUserRepo(db),
        dashboard=SQLiteDashboardRepo(db),
        site_settings=SQLiteSettingsRepo(db),
        media=SQLiteMediaRepo(db),
        storage=LocalFileStorage(settings.media_dir),
    )


def get_container(request: Request) -> AppContainer:
    container: AppContainer = request.app.state.container
    return container


Container = Annotated[AppContainer, Depends(get_container)]


# --- Request metadata ---
def get_request_meta(request: Request) -> RequestMeta:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else None
    return RequestMeta(
        ip_address=ip,
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
    )


Meta = Annotated[RequestMeta, Depends(get_request_meta)]


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_principal(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    container: Container,
) -> Principal:
    """Resolve the caller; anything short of a valid token is anonymous."""
    # Cookie (HttpOnly) wins over the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]

    out = run_resolve_principal(
        ResolvePrincipalInput(token=token),
        container.users,
        container.auth_adapter,
    )
    return out.principal


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]


def require_admin(request: Request, principal: CurrentPrincipal) -> Principal:
    if not principal.authenticated:
        logger.warning("Unauthenticated request to %s", request.url.path)
        raise UnauthorizedError("Not authenticated")
    if not principal.is_admin:
        logger.warning(
            "User %s denied admin access to %s", principal.user_id, request.url.path
        )
        raise ForbiddenError("Admin access required")
    return principal


AdminPrincipal = Annotated[Principal, Depends(require_admin)]
