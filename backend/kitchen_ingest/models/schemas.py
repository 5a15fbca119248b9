"""Pydantic schemas for pipeline values and API responses.

The domain records (``GroceryItem``, ``PantryItem``, ``Recipe``) form a
closed tagged union discriminated on ``kind``. Each record knows how to
serialise itself into a storage row via ``to_row``; the row shapes
mirror the ``grocery_items``, ``pantry_items`` and ``recipes`` tables.

Pydantic schemas are intentionally separate from the ORM models in
``kitchen_ingest.models.tables`` so that the pipeline never touches a
database session.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import Domain, JobState, RecordSource

DEFAULT_MAX_RECORDS = 50


# ---------------------------------------------------------------------------
# Pipeline values


class RawText(BaseModel):
    """OCR engine output for one job."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    language: str = "eng"


class IngestionJob(BaseModel):
    """One OCR-to-record request, owned by the orchestrator while it runs."""

    model_config = ConfigDict(frozen=True)

    domain: Domain
    image_bytes: bytes = b""
    context_id: Optional[str] = None
    max_records: int = DEFAULT_MAX_RECORDS
    language: Optional[str] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None


# ---------------------------------------------------------------------------
# Parsed records


class GroceryItem(BaseModel):
    """A grocery list entry recognised from a receipt or list photo."""

    kind: Literal["grocery"] = "grocery"
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    is_done: bool = False
    is_favorite: bool = False
    source: RecordSource = RecordSource.CAMERA

    @property
    def label(self) -> str:
        return self.name

    def to_row(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "is_done": self.is_done,
            "is_favorite": self.is_favorite,
            "source": self.source.value,
        }


class PantryItem(BaseModel):
    """A pantry entry recognised from a receipt or shelf photo."""

    kind: Literal["pantry"] = "pantry"
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    household_id: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name

    def to_row(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "household_id": self.household_id,
        }


class Recipe(BaseModel):
    """A recipe recognised from a recipe card.

    Empty ``ingredients`` or ``instructions`` mean the section was not
    found; they are stored as NULL.
    """

    kind: Literal["recipe"] = "recipe"
    title: str
    summary: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: str = ""
    source: RecordSource = RecordSource.OCR
    household_id: Optional[str] = None

    @property
    def label(self) -> str:
        return self.title

    def to_row(self) -> Dict[str, Any]:
        return {
            "household_id": self.household_id,
            "title": self.title,
            "summary": self.summary or None,
            "ingredients": list(self.ingredients) if self.ingredients else None,
            "instructions": self.instructions or None,
            "source": self.source.value,
            "cover_url": None,
        }


ParsedRecord = Annotated[Union[GroceryItem, PantryItem, Recipe], Field(discriminator="kind")]


class IngestionResult(BaseModel):
    """Outcome of a completed job.

    ``records`` are the bounded records handed to storage and
    ``inserted`` the rows storage returned for them (with identifiers).
    """

    records: List[ParsedRecord] = Field(default_factory=list)
    inserted: List[Dict[str, Any]] = Field(default_factory=list)
    raw_text: Optional[str] = None
    history: List[JobState] = Field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.records)


# ---------------------------------------------------------------------------
# API facing schemas


class IngestResponse(BaseModel):
    created: int
    inserted: List[Dict[str, Any]] = Field(default_factory=list)
    raw: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
