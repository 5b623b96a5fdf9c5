"""
Ride storage backends.

``create_storage`` builds the backend selected by
``Settings.storage_backend``.  The application constructs exactly one
instance at startup and hands it to ``RideService``.
"""

from ..core.config import Settings
from .base import RideStorage
from .document_storage import DocumentRideStorage
from .sqlite_storage import SQLiteRideStorage

__all__ = ["RideStorage", "DocumentRideStorage", "SQLiteRideStorage", "create_storage"]


def create_storage(settings: Settings) -> RideStorage:
    backend = settings.storage_backend.strip().lower()
    if backend == SQLiteRideStorage.name:
        return SQLiteRideStorage(settings.database_url, timeout=settings.sqlite_timeout)
    if backend == DocumentRideStorage.name:
        return DocumentRideStorage(settings.document_store_path)
    raise ValueError(
        f"Unknown storage backend {settings.storage_backend!r}; expected 'sqlite' or 'document'"
    )
