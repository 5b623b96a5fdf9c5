"""Pytest configuration and shared fixtures."""

from typing import Any, Dict

import pytest

from ride_records_api.app.core.config import Settings
from ride_records_api.app.services.ride_service import RideService
from ride_records_api.app.storage import DocumentRideStorage, SQLiteRideStorage


@pytest.fixture
def ride_payload() -> Dict[str, Any]:
    """A valid create/update body using the canonical field names."""
    return {
        "startLat": 35.1,
        "startLong": 33.3,
        "endLat": 35.2,
        "endLong": 33.4,
        "riderName": "A",
        "driverName": "B",
        "driverVehicle": "C",
    }


@pytest.fixture
def sqlite_storage(tmp_path):
    storage = SQLiteRideStorage(str(tmp_path / "rides.db"))
    yield storage
    storage.close()


@pytest.fixture
def document_storage(tmp_path):
    storage = DocumentRideStorage(str(tmp_path / "db.json"))
    yield storage
    storage.close()


@pytest.fixture(params=["sqlite", "document"])
def storage(request, tmp_path):
    """Every backend, so contract tests run against both."""
    if request.param == "sqlite":
        backend = SQLiteRideStorage(str(tmp_path / "rides.db"))
    else:
        backend = DocumentRideStorage(str(tmp_path / "db.json"))
    yield backend
    backend.close()


@pytest.fixture
def ride_service(storage) -> RideService:
    return RideService(storage, default_page_size=10, max_page_size=100)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=str(tmp_path / "rides.db"),
        document_store_path=str(tmp_path / "db.json"),
        log_level="WARNING",
    )
