"""Import router: CSV preview and import endpoints.

Parsing is CPU-bound, so the engine runs in a worker thread and the
endpoint returns only the final result.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from apps.api.core.config import Settings, get_settings
from apps.api.domains.imports import service
from apps.api.domains.imports.schemas import ImportResponse, PreviewResponse

router = APIRouter(prefix="/import", tags=["import"])
logger = structlog.get_logger()


async def _read_upload(file: UploadFile, settings: Settings) -> bytes:
    contents = await file.read()
    service.validate_upload(file.filename or "", contents, settings.MAX_UPLOAD_BYTES)
    return contents


@router.post("/preview", response_model=PreviewResponse)
async def preview_csv(
    file: UploadFile = File(...),
    limit: Optional[int] = Form(None, ge=0),
    mapping: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
):
    """Show detected headers, the suggested mapping and the first rows."""
    contents = await _read_upload(file, settings)
    override = service.parse_mapping_field(mapping)

    preview = await run_in_threadpool(service.preview_upload, contents, limit, override)
    return preview.to_dict()


@router.post("/csv", response_model=ImportResponse)
async def import_csv(
    file: UploadFile = File(...),
    mapping: Optional[str] = Form(None),
    day_first: Optional[bool] = Form(None),
    settings: Settings = Depends(get_settings),
):
    """Import a CSV export.

    ``mapping`` optionally overrides detected columns, e.g.
    ``{"amount": 3, "notes": null}``.
    """
    contents = await _read_upload(file, settings)
    override = service.parse_mapping_field(mapping)

    logger.info("import_request", filename=file.filename, size=len(contents))
    result = await run_in_threadpool(service.import_upload, contents, override, day_first)

    return service.result_to_response(result)
