"""OCR adapters.

The pipeline only needs one capability from an OCR engine: image bytes
in, raw text out, for a given language. ``OcrAdapter`` names that
capability; any engine satisfying it can be injected into the
orchestrator.

``TesseractOcrAdapter`` is the default engine. It preprocesses the image
with Pillow and runs Tesseract through ``pytesseract`` in a worker
thread so the event loop stays responsive.

``LimitedOcrAdapter`` wraps any adapter with a concurrency limit and a
timeout. OCR is the one memory-heavy step of a job, so a process runs
at most ``OCR_MAX_CONCURRENCY`` recognitions at a time; further jobs
wait for a free slot.
"""

from __future__ import annotations

import asyncio
import logging
from io import BytesIO
from typing import Optional, Protocol, runtime_checkable

import pytesseract
from PIL import Image

from kitchen_ingest.core.config import settings
from kitchen_ingest.models.schemas import RawText
from kitchen_ingest.utils.image_processing import preprocess_image

logger = logging.getLogger(__name__)


@runtime_checkable
class OcrAdapter(Protocol):
    """Image bytes in, recognised text out. A plain ``{"text": ...}`` mapping or string is also accepted."""

    async def recognize(self, image_bytes: bytes, language: str) -> RawText:
        ...


class TesseractOcrAdapter:
    """Recognise text with the Tesseract engine."""

    def __init__(self, tesseract_cmd: Optional[str] = None, max_size: Optional[int] = None) -> None:
        self.max_size = max_size or settings.OCR_PREPROCESS_MAX_SIZE
        tesseract_cmd = tesseract_cmd or settings.TESSERACT_CMD
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def _recognize_sync(self, image_bytes: bytes, language: str) -> str:
        processed = preprocess_image(image_bytes, max_size=self.max_size)
        with Image.open(BytesIO(processed)) as img:
            return pytesseract.image_to_string(img, lang=language)

    async def recognize(self, image_bytes: bytes, language: str) -> RawText:
        text = await asyncio.to_thread(self._recognize_sync, image_bytes, language)
        logger.debug("[ocr] tesseract lang=%s chars=%d", language, len(text))
        return RawText(text=text or "", language=language)


class LimitedOcrAdapter:
    """Bound concurrent recognitions and time out slow ones.

    The timeout covers the recognition itself, not the wait for a slot.
    A timed out call raises ``asyncio.TimeoutError``; the orchestrator
    reports it as a recognition failure.
    """

    def __init__(self, inner: OcrAdapter, max_concurrency: int = 2, timeout: Optional[float] = None) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.inner = inner
        self.max_concurrency = max_concurrency
        self.timeout = timeout
        self._slots = asyncio.Semaphore(max_concurrency)

    async def recognize(self, image_bytes: bytes, language: str) -> RawText:
        async with self._slots:
            return await asyncio.wait_for(self.inner.recognize(image_bytes, language), timeout=self.timeout)


def build_default_ocr() -> LimitedOcrAdapter:
    """Tesseract wrapped with the configured concurrency limit and timeout."""
    return LimitedOcrAdapter(
        TesseractOcrAdapter(),
        max_concurrency=settings.OCR_MAX_CONCURRENCY,
        timeout=settings.OCR_TIMEOUT_SECONDS,
    )
