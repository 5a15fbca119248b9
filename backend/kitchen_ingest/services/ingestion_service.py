"""Ingestion orchestrator.

Drives one job end to end::

    received -> ocr_requested -> ocr_succeeded -> parsed -> bounded
             -> persist_requested -> completed

with the terminal failure states ``rejected_input`` (bad upload or
missing household id, no OCR call made), ``ocr_failed`` and
``persist_failed``. Normalisation, tokenisation, parsing and bounding
are total functions, so the only failure surfaces are the input checks
and the two adapter calls.

The orchestrator keeps no per-job state between calls; the OCR and
storage adapters are injected at construction so that one instance can
serve every request of a process and tests can pass fakes.

Diagnostic logging can be enabled by setting env var INGEST_DEBUG=1.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, List, Optional, Sequence

from kitchen_ingest.core.config import settings
from kitchen_ingest.core.errors import (
    IngestionError,
    InvalidInput,
    PersistenceFailure,
    RecognitionFailure,
    UploadTooLarge,
)
from kitchen_ingest.core.observability import sentry_breadcrumb, sentry_set_tags
from kitchen_ingest.models.enums import Domain, JobState
from kitchen_ingest.models.schemas import IngestionJob, IngestionResult, RawText
from kitchen_ingest.services.bounding import bound
from kitchen_ingest.services.ocr_service import OcrAdapter
from kitchen_ingest.services.parsers import parse
from kitchen_ingest.services.persistence_service import PersistenceAdapter
from kitchen_ingest.services.text_processing import normalize, tokenize

logger = logging.getLogger(__name__)

TABLE_BY_DOMAIN: Dict[Domain, str] = {
    Domain.GROCERY: "grocery_items",
    Domain.PANTRY: "pantry_items",
    Domain.RECIPE: "recipes",
}


class _JobRun:
    """State history of one job, used for logging and error reporting."""

    def __init__(self, job: IngestionJob, debug: bool) -> None:
        self.job_id = uuid.uuid4().hex[:12]
        self.domain = job.domain
        self.debug = debug
        self.history: List[JobState] = []
        self.enter(JobState.RECEIVED)

    @property
    def state(self) -> JobState:
        return self.history[-1]

    def enter(self, state: JobState, **data) -> None:
        self.history.append(state)
        level = logging.INFO if self.debug or state in _TERMINAL_STATES else logging.DEBUG
        logger.log(level, "[ingest] job=%s domain=%s state=%s %s", self.job_id, self.domain.value, state.value, data or "")
        sentry_breadcrumb(category="ingest", message=state.value, data={"job": self.job_id, "domain": self.domain.value, **data})

    def fail(self, state: JobState, error: IngestionError) -> IngestionError:
        self.enter(state, error=error.message)
        error.state = state
        error.history = list(self.history)
        return error


_TERMINAL_STATES = {
    JobState.REJECTED_INPUT,
    JobState.OCR_FAILED,
    JobState.PERSIST_FAILED,
    JobState.COMPLETED,
}


class IngestionOrchestrator:
    """Run OCR ingestion jobs against injected OCR and storage adapters."""

    def __init__(
        self,
        ocr: OcrAdapter,
        persistence: PersistenceAdapter,
        *,
        language: Optional[str] = None,
        max_upload_size: Optional[int] = None,
        allowed_content_prefixes: Optional[Sequence[str]] = None,
    ) -> None:
        self.ocr = ocr
        self.persistence = persistence
        self.language = language or settings.OCR_LANGUAGE
        self.max_upload_size = max_upload_size if max_upload_size is not None else settings.MAX_UPLOAD_SIZE
        self.allowed_content_prefixes = tuple(
            allowed_content_prefixes if allowed_content_prefixes is not None else settings.ALLOWED_CONTENT_PREFIXES
        )
        self.debug: bool = bool(settings.INGEST_DEBUG)

    def validate(self, job: IngestionJob) -> None:
        """Raise ``InvalidInput`` for jobs that must not reach the OCR engine."""
        if not job.image_bytes:
            raise InvalidInput("file is required")
        if job.content_type and self.allowed_content_prefixes:
            if not job.content_type.startswith(self.allowed_content_prefixes):
                raise InvalidInput("Only image files are allowed")
        if self.max_upload_size and len(job.image_bytes) > self.max_upload_size:
            limit_mb = self.max_upload_size / (1024 * 1024)
            raise UploadTooLarge(f"File too large. Maximum size is {limit_mb:g}MB")
        if job.domain.requires_context and not (job.context_id or "").strip():
            raise InvalidInput("household_id is required")

    async def run(self, job: IngestionJob) -> IngestionResult:
        run = _JobRun(job, self.debug)
        sentry_set_tags({"ingest.domain": job.domain.value})

        try:
            self.validate(job)
        except InvalidInput as exc:
            raise run.fail(JobState.REJECTED_INPUT, exc)

        language = job.language or self.language
        run.enter(JobState.OCR_REQUESTED, bytes=len(job.image_bytes), language=language, filename=job.filename)
        try:
            raw = await self.ocr.recognize(job.image_bytes, language)
        except asyncio.CancelledError:
            run.enter(JobState.OCR_FAILED, error="cancelled")
            raise
        except asyncio.TimeoutError as exc:
            logger.warning("[ingest] job=%s ocr timed out", run.job_id)
            raise run.fail(JobState.OCR_FAILED, RecognitionFailure("Text recognition timed out")) from exc
        except Exception as exc:
            logger.warning("[ingest] job=%s ocr failed err=%s", run.job_id, exc)
            raise run.fail(JobState.OCR_FAILED, RecognitionFailure("Text recognition failed")) from exc
        if not isinstance(raw, RawText):
            text = raw.get("text") if isinstance(raw, dict) else raw
            raw = RawText(text=str(text or ""), language=language)
        run.enter(JobState.OCR_SUCCEEDED, chars=len(raw.text))

        tokens = tokenize(job.domain, normalize(raw.text))
        records = parse(job.domain, tokens, job.context_id)
        run.enter(JobState.PARSED, tokens=len(tokens), records=len(records))

        records = bound(records, job.max_records)
        run.enter(JobState.BOUNDED, records=len(records))

        raw_text = raw.text if job.domain is Domain.RECIPE else None
        if not records:
            # Nothing recognised is a successful, empty outcome
            run.enter(JobState.COMPLETED, created=0)
            return IngestionResult(records=[], inserted=[], raw_text=raw_text, history=run.history)

        table = TABLE_BY_DOMAIN[job.domain]
        run.enter(JobState.PERSIST_REQUESTED, table=table)
        try:
            inserted = await self.persistence.insert_batch(table, [record.to_row() for record in records])
        except Exception as exc:
            logger.error("[ingest] job=%s insert failed table=%s err=%s", run.job_id, table, exc)
            raise run.fail(JobState.PERSIST_FAILED, PersistenceFailure("Could not save recognized records")) from exc

        run.enter(JobState.COMPLETED, created=len(records))
        return IngestionResult(records=records, inserted=list(inserted or []), raw_text=raw_text, history=run.history)
