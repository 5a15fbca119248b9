"""Configuration for the ingestion API.

``Settings`` reads every value from the process environment, falling
back to the defaults below. ``.env`` files are honoured too: the one at
the repository root first, then whatever python-dotenv finds walking up
from the working directory, then one beside the ``backend`` folder.
Earlier files win and real environment variables always win.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from dotenv import load_dotenv, find_dotenv

_THIS_FILE = Path(__file__).resolve()


def _discover_env_files() -> List[str]:
    found: List[str] = []
    for candidate in (
        _THIS_FILE.parents[3] / ".env",
        find_dotenv(usecwd=True),
        _THIS_FILE.parents[2] / ".env",
    ):
        path = str(candidate) if candidate else ""
        if path and Path(path).exists() and path not in found:
            found.append(path)
    return found


_ENV_FILES = _discover_env_files()
for _env_path in _ENV_FILES:
    load_dotenv(dotenv_path=_env_path, override=False)


class Settings(BaseSettings):
    """Application settings.

    Names are case sensitive and match the environment variable that
    overrides them.
    """

    model_config = SettingsConfigDict(
        env_file=tuple(_ENV_FILES) if _ENV_FILES else (".env",),
        case_sensitive=True,
        extra="allow",
    )

    # API Settings
    PROJECT_NAME: str = "Kitchen Ingest"
    ENVIRONMENT: str = Field(default="development")

    # Database
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./kitchen_ingest.db")

    # OCR
    OCR_LANGUAGE: str = Field(default="eng")
    # Upper bound on simultaneous OCR invocations per process; image decodes
    # are memory heavy so queued jobs wait for a free slot.
    OCR_MAX_CONCURRENCY: int = Field(default=2, ge=1)
    OCR_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)
    TESSERACT_CMD: Optional[str] = Field(default=None)
    OCR_PREPROCESS_MAX_SIZE: int = Field(default=2000)

    # Ingestion
    MAX_RECORDS: int = Field(default=50, ge=0)
    INGEST_DEBUG: bool = Field(default=False)

    # File Upload
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_CONTENT_PREFIXES: list[str] = Field(default=["image/"])

    # CORS
    BACKEND_CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
    )
    FRONTEND_BASE_URL: str = Field(default="http://localhost:3000")

    # Sentry
    SENTRY_DSN: Optional[str] = Field(default=None)
    SENTRY_TRACES_SAMPLE_RATE: float = Field(default=0.0)
    SENTRY_RELEASE: Optional[str] = Field(default=None)


# Instantiate global settings
settings = Settings()
