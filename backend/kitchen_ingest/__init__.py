"""Top-level package for the kitchen document ingestion API.

This package turns photographed or scanned kitchen documents (grocery
receipts, pantry shelf photos, recipe cards) into structured records.
It contains the Pydantic schemas and ORM tables for those records, the
text processing and per-domain parsing services, the OCR and storage
adapters, and the FastAPI routers that expose the upload endpoints.

To run the API locally you can execute:

```bash
uvicorn kitchen_ingest.api.main:app --reload
```

This will serve the FastAPI application on http://localhost:8000. The
default configuration uses a local SQLite database stored in
``kitchen_ingest.db``. You can override configuration values using
environment variables or a ``.env`` file at the project root.
"""

__all__: list[str] = []
