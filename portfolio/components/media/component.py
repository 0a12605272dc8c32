"""
Media component - file upload, listing, serving and deletion.

Bytes go to a StoragePort, metadata to the media repository. A key is
written once; an upload whose metadata insert fails removes its blob.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import get_args

from portfolio.components.media.models import (
    DeleteMediaInput,
    ListMediaInput,
    MediaContentOutput,
    MediaLimits,
    MediaListOutput,
    MediaOutput,
    MediaQuery,
    MediaStats,
    OpenMediaInput,
    UploadMediaInput,
)
from portfolio.components.media.ports import MediaRepoPort, StoragePort, TimePort
from portfolio.core.ports.storage import KeyExistsError, KeyNotFoundError
from portfolio.domain.entities import MediaCategory, MediaFile
from portfolio.domain.errors import ConflictError, NotFoundError, ValidationError
from portfolio.domain.pagination import Page, normalize_page_request

logger = logging.getLogger(__name__)

MEDIA_SORT_FIELDS = ["created_at", "filename", "size_bytes"]

MAX_DESCRIPTION_LENGTH = 500
MAX_FOLDER_LENGTH = 50

_UNSAFE_FILENAME = re.compile(r"[^a-zA-Z0-9.-]")
_UNSAFE_FOLDER = re.compile(r"[^a-zA-Z0-9_-]")


# --- Helper Functions ---


def normalize_content_type(content_type: str | None) -> str:
    """Lowercase media type without parameters ("text/plain; charset=x" -> "text/plain")."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def categorize(content_type: str, limits: MediaLimits) -> MediaCategory:
    if content_type in limits.image_types:
        return "image"
    if content_type in limits.document_types:
        return "document"
    return "other"


def sanitize_filename(filename: str) -> str:
    """Last path segment with anything but letters, digits, dot and dash replaced by "_"."""
    name = re.split(r"[\\/]", filename.strip())[-1]
    return _UNSAFE_FILENAME.sub("_", name) or "file"


def sanitize_folder(folder: str | None, default: str) -> str:
    """Reduce a folder name to a single safe path segment."""
    cleaned = _UNSAFE_FOLDER.sub("_", (folder or "").strip().strip("/"))
    return cleaned[:MAX_FOLDER_LENGTH] or default


def storage_key(folder: str, filename: str, now: datetime) -> str:
    return f"{folder}/{int(now.timestamp() * 1000)}_{filename}"


def validate_upload(inp: UploadMediaInput, limits: MediaLimits) -> str:
    """
    Check size and type of an upload.

    Returns the normalized content type.

    Raises:
        ValidationError: On an empty or oversized file, or a type outside the allow-list
    """
    if not inp.data:
        raise ValidationError("file", "File is empty")

    if len(inp.data) > limits.max_size_bytes:
        max_mb = limits.max_size_bytes / (1024 * 1024)
        raise ValidationError("file", f"File size exceeds {max_mb:g}MB limit")

    content_type = normalize_content_type(inp.content_type)
    if content_type not in limits.allowed_types:
        raise ValidationError(
            "content_type",
            f"File type '{content_type or 'unknown'}' is not allowed. "
            f"Allowed: {', '.join(sorted(limits.allowed_types))}",
        )

    if len(inp.description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            "description", f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
        )
    return content_type


# --- Component Entry Points ---


def run_upload(
    inp: UploadMediaInput,
    *,
    repo: MediaRepoPort,
    storage: StoragePort,
    time: TimePort,
    limits: MediaLimits,
) -> MediaOutput:
    content_type = validate_upload(inp, limits)
    filename = sanitize_filename(inp.filename)
    folder = sanitize_folder(inp.folder, limits.default_folder)
    now = time.now_utc()
    key = storage_key(folder, filename, now)

    try:
        stored = storage.put(key, inp.data, content_type)
    except KeyExistsError as e:
        raise ConflictError(f"A file is already stored as '{key}'") from e

    media = MediaFile(
        key=stored.key,
        filename=filename,
        content_type=content_type,
        size_bytes=stored.size_bytes,
        category=categorize(content_type, limits),
        folder=folder,
        description=inp.description.strip(),
        sha256=stored.sha256,
        uploaded_by=inp.principal.user_id,
        created_at=now,
    )
    try:
        repo.insert(media)
    except Exception:
        storage.delete(key)
        raise

    logger.info("Uploaded %s (%d bytes, %s)", key, media.size_bytes, content_type)
    return MediaOutput(media=media)


def run_list(
    inp: ListMediaInput,
    *,
    repo: MediaRepoPort,
    default_limit: int = 10,
    max_limit: int = 100,
) -> MediaListOutput:
    if inp.filters.category is not None and inp.filters.category not in get_args(MediaCategory):
        raise ValidationError("category", f"Unknown media category '{inp.filters.category}'")

    page_req = normalize_page_request(
        inp.page,
        inp.limit,
        inp.sort,
        inp.order,
        allowed_sorts=MEDIA_SORT_FIELDS,
        default_limit=default_limit,
        max_limit=max_limit,
    )
    items, total = repo.list(MediaQuery(filters=inp.filters, page=page_req))

    counts = repo.count_by_category()
    stats = MediaStats(
        total=sum(counts.values()),
        images=counts.get("image", 0),
        documents=counts.get("document", 0),
        others=counts.get("other", 0),
    )
    return MediaListOutput(
        page=Page(items=items, total=total, page=page_req.page, limit=page_req.limit),
        stats=stats,
    )


def run_open(
    inp: OpenMediaInput,
    *,
    repo: MediaRepoPort,
    storage: StoragePort,
) -> MediaContentOutput:
    media = repo.get_by_key(inp.key)
    if media is None:
        raise NotFoundError("File not found")
    try:
        data = storage.get(media.key)
    except KeyNotFoundError as e:
        logger.warning("Media %s has no stored object at %s", media.id, media.key)
        raise NotFoundError("File not found") from e
    return MediaContentOutput(media=media, data=data)


def run_delete(
    inp: DeleteMediaInput,
    *,
    repo: MediaRepoPort,
    storage: StoragePort,
) -> None:
    media = repo.get_by_id(inp.media_id.strip().lower())
    if media is None or not repo.delete(media.id):
        raise NotFoundError("File not found")
    if not storage.delete(media.key):
        logger.warning("Media %s deleted but %s was already gone from storage", media.id, media.key)
    logger.info("Deleted media %s (%s)", media.id, media.key)


def run(
    inp: UploadMediaInput | ListMediaInput | OpenMediaInput | DeleteMediaInput,
    *,
    repo: MediaRepoPort,
    storage: StoragePort,
    time: TimePort,
    limits: MediaLimits,
) -> MediaOutput | MediaListOutput | MediaContentOutput | None:
    """Main component entry point."""
    if isinstance(inp, UploadMediaInput):
        return run_upload(inp, repo=repo, storage=storage, time=time, limits=limits)
    elif isinstance(inp, ListMediaInput):
        return run_list(inp, repo=repo)
    elif isinstance(inp, OpenMediaInput):
        return run_open(inp, repo=repo, storage=storage)
    elif isinstance(inp, DeleteMediaInput):
        run_delete(inp, repo=repo, storage=storage)
        return None
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
