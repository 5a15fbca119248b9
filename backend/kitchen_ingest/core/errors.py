"""Error taxonomy for ingestion jobs.

Only the two external adapter calls (OCR and storage) and the upfront
input checks can fail; text normalization, tokenization, parsing and
bounding are total functions. Each error carries the HTTP status the
request boundary should answer with and a message that is safe to show
to the caller.
"""

from __future__ import annotations

from typing import List, Optional


class IngestionError(Exception):
    """Base class for failures reported back to the caller."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        # Filled in by the orchestrator: terminal job state and the path to it
        self.state: Optional[str] = None
        self.history: List[str] = []


class InvalidInput(IngestionError):
    """Missing file, unsupported upload or missing household id."""

    status_code = 400


class UploadTooLarge(InvalidInput):
    status_code = 413


class RecognitionFailure(IngestionError):
    """The OCR adapter raised or timed out."""

    status_code = 500


class PersistenceFailure(IngestionError):
    """The storage adapter rejected the batch insert."""

    status_code = 500
