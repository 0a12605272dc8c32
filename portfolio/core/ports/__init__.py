# Ports (Protocol Interfaces) shared across components
# Abstract interfaces for adapters; no implementations here

from portfolio.core.ports.email import (
    EmailAddress,
    EmailPort,
    EmailResult,
    EmailSendError,
    EmailStatus,
)
from portfolio.core.ports.storage import (
    KeyExistsError,
    KeyNotFoundError,
    StorageError,
    StoragePort,
    StoredObject,
)

__all__ = [
    "EmailAddress",
    "EmailPort",
    "EmailResult",
    "EmailSendError",
    "EmailStatus",
    "KeyExistsError",
    "KeyNotFoundError",
    "StorageError",
    "StoragePort",
    "StoredObject",
]
