"""
Media endpoints.

Admins upload, list and delete files; stored files are served publicly
by key so they can be embedded in posts and projects.
"""

from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from portfolio.api.deps import AdminPrincipal, Container, require_admin
from portfolio.api.responses import dump, envelope
from portfolio.components import media as md
from portfolio.domain.entities import MediaCategory, MediaFile

router = APIRouter()


def serialize(media: MediaFile) -> dict[str, Any]:
    data = dump(media)
    data["url"] = media.url
    return data


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_media(
    container: Container,
    principal: AdminPrincipal,
    file: UploadFile = File(...),
    folder: str | None = Form(None),
    description: str = Form(""),
) -> dict[str, Any]:
    limits = container.media_limits
    # One byte past the limit is enough to reject an oversized upload
    data = file.file.read(limits.max_size_bytes + 1)
    out = md.run_upload(
        md.UploadMediaInput(
            filename=file.filename or "file",
            content_type=file.content_type or "application/octet-stream",
            data=data,
            folder=folder,
            description=description,
            principal=principal,
        ),
        repo=container.media,
        storage=container.storage,
        time=container.clock,
        limits=limits,
    )
    return envelope(serialize(out.media), "File uploaded successfully")


@router.get("", dependencies=[Depends(require_admin)])
def list_media(
    container: Container,
    page: int | None = Query(None),
    limit: int | None = Query(None),
    sort: str | None = Query(None),
    order: str | None = Query(None),
    category: MediaCategory | None = Query(None),
    folder: str | None = Query(None, max_length=50),
) -> dict[str, Any]:
    out = md.run_list(
        md.ListMediaInput(
            filters=md.MediaFilter(category=category, folder=folder),
            page=page,
            limit=limit,
            sort=sort,
            order=order,
        ),
        repo=container.media,
        default_limit=container.rules.pagination.default_limit,
        max_limit=container.rules.pagination.max_limit,
    )
    return envelope(
        {
            "files": [serialize(m) for m in out.page.items],
            "stats": {
                "total": out.stats.total,
                "images": out.stats.images,
                "documents": out.stats.documents,
                "others": out.stats.others,
            },
        },
        pagination=out.page.meta(),
    )


@router.get("/files/{key:path}")
def serve_media(key: str, container: Container) -> Response:
    out = md.run_open(md.OpenMediaInput(key=key), repo=container.media, storage=container.storage)
    return Response(
        content=out.data,
        media_type=out.media.content_type,
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )


@router.delete("/{media_id}", dependencies=[Depends(require_admin)])
def delete_media(media_id: str, container: Container) -> dict[str, Any]:
    md.run_delete(
        md.DeleteMediaInput(media_id=media_id), repo=container.media, storage=container.storage
    )
    return envelope(None, "File deleted successfully")
