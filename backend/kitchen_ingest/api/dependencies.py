"""Common dependencies for FastAPI routes.

The orchestrator is built once per process so that every request shares
the same OCR concurrency limit. Tests replace it through
``app.dependency_overrides[get_orchestrator]``.
"""

from __future__ import annotations

from functools import lru_cache

from kitchen_ingest.core.config import settings
from kitchen_ingest.services.ingestion_service import IngestionOrchestrator
from kitchen_ingest.services.ocr_service import build_default_ocr
from kitchen_ingest.services.persistence_service import SqlAlchemyPersistenceAdapter


@lru_cache(maxsize=1)
def get_orchestrator() -> IngestionOrchestrator:
    """Return the process-wide orchestrator (Tesseract + SQLAlchemy)."""
    return IngestionOrchestrator(
        build_default_ocr(),
        SqlAlchemyPersistenceAdapter(),
        language=settings.OCR_LANGUAGE,
        max_upload_size=settings.MAX_UPLOAD_SIZE,
        allowed_content_prefixes=settings.ALLOWED_CONTENT_PREFIXES,
    )
