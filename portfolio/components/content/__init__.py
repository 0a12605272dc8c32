"""
Content component.

Blog post and project repository operations with derived fields and
visibility-aware reads.
"""

from portfolio.components.content.component import (
    ID_REGEX,
    resolve_document,
    run,
    run_create,
    run_delete,
    run_get,
    run_increment_views,
    run_list,
    run_update,
)
from portfolio.components.content.models import (
    DEFAULT_SORT_FIELDS,
    BlogCreateSchema,
    BlogUpdateSchema,
    ContentFilter,
    ContentListOutput,
    ContentOutput,
    ContentQuery,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    GetContentOutput,
    ListContentInput,
    ProjectCreateSchema,
    ProjectUpdateSchema,
    UpdateContentInput,
)
from portfolio.components.content.ports import ContentRepoPort, TimePort

__all__ = [
    # Component
    "run",
    "run_create",
    "run_update",
    "run_get",
    "run_list",
    "run_delete",
    "run_increment_views",
    "resolve_document",
    "ID_REGEX",
    "DEFAULT_SORT_FIELDS",
    # Schemas
    "BlogCreateSchema",
    "BlogUpdateSchema",
    "ProjectCreateSchema",
    "ProjectUpdateSchema",
    # Input/Output
    "ContentFilter",
    "ContentQuery",
    "CreateContentInput",
    "UpdateContentInput",
    "GetContentInput",
    "ListContentInput",
    "DeleteContentInput",
    "ContentOutput",
    "GetContentOutput",
    "ContentListOutput",
    # Ports
    "ContentRepoPort",
    "TimePort",
]
