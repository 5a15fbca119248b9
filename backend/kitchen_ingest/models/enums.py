"""Enumeration types used throughout the ingestion API.

Enumerations constrain the values passed between the pipeline stages
and through the API, and keep the per-domain lookups (table names,
record sources) readable.
"""

from enum import Enum


class Domain(str, Enum):
    """Record category produced by one ingestion job."""

    GROCERY = "grocery"
    PANTRY = "pantry"
    RECIPE = "recipe"

    @property
    def requires_context(self) -> bool:
        """Pantry items and recipes belong to a household; grocery items do not."""
        return self is not Domain.GROCERY


class JobState(str, Enum):
    """Lifecycle states of a single ingestion job."""

    RECEIVED = "received"
    REJECTED_INPUT = "rejected_input"
    OCR_REQUESTED = "ocr_requested"
    OCR_SUCCEEDED = "ocr_succeeded"
    OCR_FAILED = "ocr_failed"
    PARSED = "parsed"
    BOUNDED = "bounded"
    PERSIST_REQUESTED = "persist_requested"
    PERSIST_FAILED = "persist_failed"
    COMPLETED = "completed"


class RecordSource(str, Enum):
    """Where a stored record came from."""

    CAMERA = "camera"
    OCR = "ocr"
