"""Persistence adapters.

``PersistenceAdapter`` is the storage capability the orchestrator needs:
insert a batch of rows into a named table and return the stored rows,
identifiers included. The default implementation writes through the
async SQLAlchemy session factory from ``kitchen_ingest.core.database``.

The batch is added in one session and committed once. No retries are
attempted here; a failed insert propagates to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kitchen_ingest.models.tables import TABLES_BY_NAME

logger = logging.getLogger(__name__)


@runtime_checkable
class PersistenceAdapter(Protocol):
    async def insert_batch(self, table_name: str, rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        ...


class SqlAlchemyPersistenceAdapter:
    """Insert rows into the ORM table registered under ``table_name``."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None) -> None:
        if session_factory is None:
            from kitchen_ingest.core.database import AsyncSessionLocal

            session_factory = AsyncSessionLocal
        self.session_factory = session_factory

    async def insert_batch(self, table_name: str, rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        try:
            model = TABLES_BY_NAME[table_name]
        except KeyError:
            raise ValueError(f"Unknown table: {table_name}") from None
        if not rows:
            return []
        async with self.session_factory() as session:
            objects = [model(**row) for row in rows]
            session.add_all(objects)
            await session.commit()
            for obj in objects:
                await session.refresh(obj)
            inserted = [obj.as_dict() for obj in objects]
        logger.info("[persist] inserted table=%s rows=%d", table_name, len(inserted))
        return inserted
