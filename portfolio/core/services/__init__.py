# Services shared across components
# Build outbound notifications over injected ports

from portfolio.core.services.notifications import (
    SiteInfo,
    contact_tasks,
    welcome_email_task,
)

__all__ = [
    "SiteInfo",
    "contact_tasks",
    "welcome_email_task",
]
