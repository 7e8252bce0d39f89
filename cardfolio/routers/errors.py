"""Translate service exceptions into HTTP errors."""
from __future__ import annotations

from contextlib import contextmanager

from fastapi import HTTPException, UploadFile

from cardfolio.domain.uploads import ImageRules, RASTER_RULES, UploadRejected
from cardfolio.services.documents import SectionError
from cardfolio.services.upload_service import UploadService


@contextmanager
def service_errors():
    try:
        yield
    except SectionError as exc:
        raise HTTPException(exc.status_code, exc.message) from exc
    except UploadRejected as exc:
        raise HTTPException(400, exc.message) from exc


async def store_upload(
    uploads: UploadService,
    section: str,
    owner_id: str,
    file: UploadFile | None,
    *,
    rules: ImageRules = RASTER_RULES,
    max_size: tuple[int, int] = (1600, 1600),
) -> str:
    if file is None or not file.filename:
        raise HTTPException(400, "No file uploaded")
    data = await file.read()
    with service_errors():
        return uploads.store_image(
            section,
            owner_id,
            file.filename,
            file.content_type or "",
            data,
            rules=rules,
            max_size=max_size,
        )
