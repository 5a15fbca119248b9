from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from kitchen_ingest.api.dependencies import get_orchestrator
from kitchen_ingest.api.main import app
from kitchen_ingest.services.ingestion_service import IngestionOrchestrator

from fakes import FakeOcr, FakeStore

PNG = ("photo.png", b"\x89PNG fake", "image/png")


@pytest.fixture
def wire():
    """Install an orchestrator built from the given fakes; return a client."""

    def _wire(ocr, store=None, **kwargs):
        kwargs.setdefault("max_upload_size", 1024)
        kwargs.setdefault("allowed_content_prefixes", ["image/"])
        orchestrator = IngestionOrchestrator(ocr, store or FakeStore(), **kwargs)
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        return TestClient(app)

    yield _wire
    app.dependency_overrides.clear()


def test_grocery_upload_creates_items(wire):
    store = FakeStore()
    client = wire(FakeOcr("Milk, Eggs x2\nBread 16oz"), store)
    resp = client.post("/grocery/ocr", files={"file": PNG})
    assert resp.status_code == 200
    body = resp.json()
    assert body["created"] == 3
    assert [row["name"] for row in body["inserted"]] == ["Milk", "Eggs", "Bread"]
    assert "raw" not in body
    assert store.calls[0][0] == "grocery_items"


def test_missing_file_is_bad_request_without_ocr(wire):
    ocr = FakeOcr("Milk")
    client = wire(ocr)
    resp = client.post("/grocery/ocr", data={"household_id": "hh-1"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "file is required"}
    assert len(ocr.calls) == 0


def test_empty_file_is_bad_request_without_ocr(wire):
    ocr = FakeOcr("Milk")
    client = wire(ocr)
    resp = client.post("/grocery/ocr", files={"file": ("empty.png", b"", "image/png")})
    assert resp.status_code == 400
    assert len(ocr.calls) == 0


def test_pantry_requires_household(wire):
    client = wire(FakeOcr("Milk"))
    resp = client.post("/pantry/ocr", files={"file": PNG})
    assert resp.status_code == 400
    assert resp.json() == {"error": "household_id is required"}


def test_pantry_upload_tags_household(wire):
    store = FakeStore()
    client = wire(FakeOcr("Rice 2 lbs\nBeans"), store)
    resp = client.post("/pantry/ocr", files={"file": PNG}, data={"household_id": "hh-9"})
    assert resp.status_code == 200
    assert resp.json()["created"] == 2
    [(table, rows)] = store.calls
    assert table == "pantry_items"
    assert {row["household_id"] for row in rows} == {"hh-9"}


def test_recipe_upload_returns_raw_text(wire):
    text = "Pasta Bake\n\nIngredients\nPasta\n\nMethod\nBoil"
    client = wire(FakeOcr(text))
    resp = client.post("/recipes/ocr", files={"file": PNG}, data={"household_id": "hh-1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["created"] == 1
    assert body["raw"] == text
    assert body["inserted"][0]["title"] == "Pasta Bake"
    assert body["inserted"][0]["ingredients"] == ["Pasta"]


def test_language_form_field_reaches_ocr(wire):
    ocr = FakeOcr("Milch")
    client = wire(ocr)
    client.post("/grocery/ocr", files={"file": PNG}, data={"language": "deu"})
    assert ocr.calls[0][1] == "deu"


def test_nothing_recognised_returns_zero(wire):
    store = FakeStore()
    client = wire(FakeOcr(""), store)
    resp = client.post("/grocery/ocr", files={"file": PNG})
    assert resp.status_code == 200
    assert resp.json() == {"created": 0, "inserted": []}
    assert store.calls == []


def test_ocr_failure_is_server_error(wire):
    client = wire(FakeOcr(error=RuntimeError("engine missing at /usr/bin/tesseract")))
    resp = client.post("/grocery/ocr", files={"file": PNG})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Text recognition failed"}


def test_persistence_failure_is_server_error(wire):
    client = wire(FakeOcr("Milk"), FakeStore(error=RuntimeError("duplicate key")))
    resp = client.post("/grocery/ocr", files={"file": PNG})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Could not save recognized records"}


def test_non_image_upload_is_rejected(wire):
    ocr = FakeOcr("Milk")
    client = wire(ocr)
    resp = client.post("/grocery/ocr", files={"file": ("notes.txt", b"Milk", "text/plain")})
    assert resp.status_code == 400
    assert ocr.calls == []


def test_oversized_upload_is_rejected(wire):
    client = wire(FakeOcr("Milk"), max_upload_size=4)
    resp = client.post("/grocery/ocr", files={"file": PNG})
    assert resp.status_code == 413
    assert "too large" in resp.json()["error"]


def test_health_check():
    client = TestClient(app)
    assert client.get("/health").json() == {"status": "healthy"}
