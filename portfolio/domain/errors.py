"""
Domain error taxonomy.

Primary-path errors propagate to the HTTP layer, which maps them to
structured responses (see portfolio.api.errors). SideEffectFailure is only
ever logged by the dispatcher.
"""

from __future__ import annotations


class PortfolioError(Exception):
    """Base error for all domain failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(PortfolioError):
    """A field failed its constraint. Only the first failure is reported."""

    status_code = 400

    def __init__(self, field: str | None, message: str) -> None:
        self.field = field
        super().__init__(message)


class NotFoundError(PortfolioError):
    """Resource does not exist or is not visible to the principal."""

    status_code = 404


class ConflictError(PortfolioError):
    """Duplicate slug/email, or a stale optimistic write."""

    status_code = 409


class InvalidTransitionError(ConflictError):
    """State machine rejected a status change."""

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot transition from '{from_status}' to '{to_status}'")


class UnauthorizedError(PortfolioError):
    status_code = 401


class ForbiddenError(PortfolioError):
    status_code = 403


class DuplicateKeyError(Exception):
    """Raised by persistence adapters when a unique constraint is violated."""

    def __init__(self, key: str, value: str | None = None) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Duplicate value for unique key '{key}'")


class StaleWriteError(Exception):
    """Raised by persistence adapters when a version check fails."""

    def __init__(self, entity_id: str, expected_version: int) -> None:
        self.entity_id = entity_id
        self.expected_version = expected_version
        super().__init__(f"Stale write for {entity_id} (expected version {expected_version})")


class SideEffectFailure(Exception):
    """A side-effect task failed. Swallowed and logged at the dispatcher boundary."""

    def __init__(self, task_name: str, cause: BaseException) -> None:
        self.task_name = task_name
        self.cause = cause
        super().__init__(f"Side effect '{task_name}' failed: {cause}")
