"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with a local SQLite file and no further setup.  In a
production deployment you should override these via environment
variables.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Ride Records API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # Prefix under which the ride routes are mounted.  Empty by default so
    # that existing clients keep calling ``/rides``.
    api_prefix: str = os.getenv("API_PREFIX", "")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Which storage backend to use: ``sqlite`` (relational table) or
    # ``document`` (JSON file).  Both expose the same behaviour.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite")

    # Path to the SQLite database file and the JSON document file.
    # Relative paths are resolved against the working directory.
    database_url: str = os.getenv("DATABASE_URL", "rides.db")
    document_store_path: str = os.getenv("DOCUMENT_STORE_PATH", "db.json")
    sqlite_timeout: float = float(os.getenv("SQLITE_TIMEOUT", "30"))

    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "*"))
    )

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
