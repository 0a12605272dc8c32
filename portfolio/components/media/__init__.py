"""
Media component.

Admin uploads to blob storage with type and size limits, listing with
per-category stats, public file serving and deletion.
"""

from portfolio.components.media.component import (
    MEDIA_SORT_FIELDS,
    categorize,
    run,
    run_delete,
    run_list,
    run_open,
    run_upload,
    sanitize_filename,
    sanitize_folder,
    storage_key,
    validate_upload,
)
from portfolio.components.media.models import (
    DeleteMediaInput,
    ListMediaInput,
    MediaContentOutput,
    MediaFilter,
    MediaLimits,
    MediaListOutput,
    MediaOutput,
    MediaQuery,
    MediaStats,
    OpenMediaInput,
    UploadMediaInput,
)
from portfolio.components.media.ports import MediaRepoPort

__all__ = [
    "run",
    "run_upload",
    "run_list",
    "run_open",
    "run_delete",
    "MEDIA_SORT_FIELDS",
    "categorize",
    "sanitize_filename",
    "sanitize_folder",
    "storage_key",
    "validate_upload",
    "MediaLimits",
    "UploadMediaInput",
    "ListMediaInput",
    "OpenMediaInput",
    "DeleteMediaInput",
    "MediaFilter",
    "MediaQuery",
    "MediaStats",
    "MediaOutput",
    "MediaListOutput",
    "MediaContentOutput",
    "MediaRepoPort",
]
