"""API routes for OCR ingestion of grocery, pantry and recipe photos."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from kitchen_ingest.api.dependencies import get_orchestrator
from kitchen_ingest.core.config import settings
from kitchen_ingest.models.enums import Domain
from kitchen_ingest.models.schemas import ErrorResponse, IngestionJob, IngestResponse
from kitchen_ingest.services.ingestion_service import IngestionOrchestrator

router = APIRouter(tags=["ingest"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def _ingest(
    domain: Domain,
    file: Optional[UploadFile],
    household_id: Optional[str],
    language: Optional[str],
    orchestrator: IngestionOrchestrator,
) -> IngestResponse:
    contents = await file.read() if file is not None else b""
    job = IngestionJob(
        domain=domain,
        image_bytes=contents,
        context_id=(household_id or "").strip() or None,
        max_records=settings.MAX_RECORDS,
        language=(language or "").strip() or None,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
    )
    result = await orchestrator.run(job)
    payload = {"created": result.created_count, "inserted": result.inserted}
    if result.raw_text is not None:
        payload["raw"] = result.raw_text
    return IngestResponse(**payload)


@router.post("/grocery/ocr", response_model=IngestResponse, response_model_exclude_unset=True, responses=_ERROR_RESPONSES)
async def ingest_grocery(
    file: Optional[UploadFile] = File(None),
    household_id: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
) -> IngestResponse:
    """Add the items on a photographed list or receipt to the grocery list."""
    return await _ingest(Domain.GROCERY, file, household_id, language, orchestrator)


@router.post("/pantry/ocr", response_model=IngestResponse, response_model_exclude_unset=True, responses=_ERROR_RESPONSES)
async def ingest_pantry(
    file: Optional[UploadFile] = File(None),
    household_id: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
) -> IngestResponse:
    """Add the items on a receipt or shelf photo to a household pantry."""
    return await _ingest(Domain.PANTRY, file, household_id, language, orchestrator)


@router.post("/recipes/ocr", response_model=IngestResponse, response_model_exclude_unset=True, responses=_ERROR_RESPONSES)
async def ingest_recipe(
    file: Optional[UploadFile] = File(None),
    household_id: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
) -> IngestResponse:
    """Store a photographed recipe card as a household recipe.

    The response also carries the recognised text under ``raw``.
    """
    return await _ingest(Domain.RECIPE, file, household_id, language, orchestrator)
