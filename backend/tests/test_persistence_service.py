from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine

from kitchen_ingest.core.database import build_session_factory, init_db, normalise_database_url
from kitchen_ingest.models.enums import Domain
from kitchen_ingest.models.schemas import IngestionJob
from kitchen_ingest.models.tables import PantryItemRow, RecipeRow
from kitchen_ingest.services.ingestion_service import IngestionOrchestrator
from kitchen_ingest.services.persistence_service import SqlAlchemyPersistenceAdapter

from fakes import FakeOcr


async def _session_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    return build_session_factory(engine)


@pytest.mark.asyncio
async def test_insert_batch_assigns_ids_and_returns_rows():
    adapter = SqlAlchemyPersistenceAdapter(await _session_factory())
    rows = [
        {"name": "Milk", "quantity": None, "unit": None, "is_done": False, "is_favorite": False, "source": "camera"},
        {"name": "Eggs", "quantity": None, "unit": None, "is_done": False, "is_favorite": False, "source": "camera"},
    ]
    inserted = await adapter.insert_batch("grocery_items", rows)
    assert [row["name"] for row in inserted] == ["Milk", "Eggs"]
    assert all(row["id"] for row in inserted)
    assert inserted[0]["id"] != inserted[1]["id"]
    assert inserted[0]["source"] == "camera"
    assert isinstance(inserted[0]["created_at"], str)


@pytest.mark.asyncio
async def test_insert_batch_stores_recipe_ingredients_as_json():
    Session = await _session_factory()
    adapter = SqlAlchemyPersistenceAdapter(Session)
    row = {
        "household_id": "hh-1",
        "title": "Pasta Bake",
        "summary": None,
        "ingredients": ["Pasta", "Sauce"],
        "instructions": "Boil",
        "source": "ocr",
        "cover_url": None,
    }
    [inserted] = await adapter.insert_batch("recipes", [row])
    assert inserted["ingredients"] == ["Pasta", "Sauce"]
    async with Session() as session:
        stored = (await session.execute(select(RecipeRow))).scalar_one()
        assert stored.title == "Pasta Bake"
        assert stored.household_id == "hh-1"


@pytest.mark.asyncio
async def test_insert_batch_unknown_table():
    adapter = SqlAlchemyPersistenceAdapter(await _session_factory())
    with pytest.raises(ValueError):
        await adapter.insert_batch("chores", [{"name": "Dishes"}])


@pytest.mark.asyncio
async def test_insert_batch_empty_rows():
    adapter = SqlAlchemyPersistenceAdapter(await _session_factory())
    assert await adapter.insert_batch("pantry_items", []) == []


@pytest.mark.asyncio
async def test_orchestrator_writes_pantry_rows_through_sqlalchemy():
    Session = await _session_factory()
    orchestrator = IngestionOrchestrator(FakeOcr("Rice 2 lbs\nBeans x3\n"), SqlAlchemyPersistenceAdapter(Session))
    job = IngestionJob(domain=Domain.PANTRY, image_bytes=b"img", context_id="hh-7")
    result = await orchestrator.run(job)
    assert result.created_count == 2
    assert [row["name"] for row in result.inserted] == ["Rice", "Beans"]
    async with Session() as session:
        names = (await session.execute(select(PantryItemRow.name).where(PantryItemRow.household_id == "hh-7"))).scalars().all()
    assert sorted(names) == ["Beans", "Rice"]


def test_normalise_database_url_selects_async_drivers():
    assert normalise_database_url("sqlite:///./x.db").startswith("sqlite+aiosqlite://")
    assert normalise_database_url("postgresql://u:p@host/db").startswith("postgresql+psycopg://u:p@")
    assert normalise_database_url("sqlite+aiosqlite:///:memory:") == "sqlite+aiosqlite:///:memory:"
