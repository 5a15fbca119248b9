"""SQLAlchemy ORM models for ingested records.

These models define the three tables the ingestion pipeline writes to.
Identifiers are UUID strings assigned on insert so that rows from
different households never collide. Recipe ingredients are stored in a
JSON column.

If you extend or modify these models call the ``init_db`` helper during
development to recreate the tables.
"""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Any, Dict

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    Numeric,
    Text,
    JSON,
)

from kitchen_ingest.core.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class RowMixin:
    """Serialise a mapped row into a JSON-friendly dict."""

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for column in self.__table__.columns:  # type: ignore[attr-defined]
            value = getattr(self, column.name)
            if isinstance(value, dt.datetime):
                value = value.isoformat()
            elif column.name == "quantity" and value is not None:
                value = float(value)
            out[column.name] = value
        return out


class GroceryItemRow(RowMixin, Base):
    """Grocery list entry."""

    __tablename__ = "grocery_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    quantity = Column(Numeric, nullable=True)
    unit = Column(String, nullable=True)
    is_done = Column(Boolean, nullable=False, default=False)
    is_favorite = Column(Boolean, nullable=False, default=False)
    source = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class PantryItemRow(RowMixin, Base):
    """Household pantry entry."""

    __tablename__ = "pantry_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    household_id = Column(String(36), nullable=True, index=True)
    name = Column(String, nullable=False, index=True)
    quantity = Column(Numeric, nullable=True)
    unit = Column(String, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class RecipeRow(RowMixin, Base):
    """Household recipe."""

    __tablename__ = "recipes"

    id = Column(String(36), primary_key=True, default=_uuid)
    household_id = Column(String(36), nullable=True, index=True)
    title = Column(String, nullable=False)
    summary = Column(Text, nullable=True)
    ingredients = Column(JSON, nullable=True)
    instructions = Column(Text, nullable=True)
    cover_url = Column(String, nullable=True)
    source = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


TABLES_BY_NAME = {
    model.__tablename__: model
    for model in (GroceryItemRow, PantryItemRow, RecipeRow)
}
