"""Unit tests for RideService orchestration."""

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from ride_records_api.app.core.errors import (
    EmptyCollectionError,
    RideNotFoundError,
    RideValidationError,
    StorageUnavailableError,
)
from ride_records_api.app.schemas.ride import PageRef
from ride_records_api.app.services import ride_service as ride_service_module
from ride_records_api.app.services.ride_service import RideService
from ride_records_api.app.storage.base import RideStorage


class TestCreateRide:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, ride_service, ride_payload):
        ride = await ride_service.create_ride(ride_payload)

        assert ride.id == 1
        assert ride.created_at == ride.updated_at
        assert ride.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_invalid_ride_leaves_store_unchanged(self, ride_service, ride_payload):
        await ride_service.create_ride(ride_payload)

        with pytest.raises(RideValidationError) as exc_info:
            await ride_service.create_ride({**ride_payload, "startLat": 200})

        assert "latitude" in exc_info.value.message
        assert ride_service.storage.count_all() == 1

    @pytest.mark.asyncio
    async def test_create_then_get_round_trip(self, ride_service, ride_payload):
        created = await ride_service.create_ride(ride_payload)

        fetched = await ride_service.get_ride(created.id)

        assert fetched == created

    @pytest.mark.asyncio
    async def test_concurrent_creates(self, ride_service, ride_payload):
        rides = await asyncio.gather(*(ride_service.create_ride(ride_payload) for _ in range(20)))

        assert sorted(ride.id for ride in rides) == list(range(1, 21))


class TestListRides:

    @pytest.mark.asyncio
    async def test_empty_store(self, ride_service):
        with pytest.raises(EmptyCollectionError):
            await ride_service.list_rides(page="1", limit="3")

    @pytest.mark.asyncio
    async def test_pages(self, ride_service, ride_payload):
        for _ in range(10):
            await ride_service.create_ride(ride_payload)

        first = await ride_service.list_rides(page="1", limit="3")
        last = await ride_service.list_rides(page="4", limit="3")

        assert [ride.id for ride in first.rides] == [1, 2, 3]
        assert first.previous is None
        assert first.next == PageRef(page=2, limit=3)
        assert [ride.id for ride in last.rides] == [10]
        assert last.next is None
        assert last.previous == PageRef(page=3, limit=3)

    @pytest.mark.asyncio
    async def test_defaults(self, ride_service, ride_payload):
        for _ in range(12):
            await ride_service.create_ride(ride_payload)

        page = await ride_service.list_rides()

        assert len(page.rides) == 10
        assert page.next == PageRef(page=2, limit=10)

    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, ride_service, ride_payload):
        await ride_service.create_ride(ride_payload)

        page = await ride_service.list_rides(page="5", limit="2")

        assert page.rides == []
        assert page.previous == PageRef(page=4, limit=2)

    @pytest.mark.asyncio
    async def test_bad_params_never_reach_storage(self):
        storage = MagicMock(spec=RideStorage)
        service = RideService(storage)

        with pytest.raises(RideValidationError):
            await service.list_rides(page="zero", limit="3")

        storage.count_all.assert_not_called()
        storage.list_window.assert_not_called()


class TestGetUpdateDelete:

    @pytest.mark.asyncio
    async def test_get_missing(self, ride_service):
        with pytest.raises(RideNotFoundError) as exc_info:
            await ride_service.get_ride(99)

        assert exc_info.value.ride_id == 99
        assert "99" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_update(self, ride_service, ride_payload):
        created = await ride_service.create_ride(ride_payload)

        updated = await ride_service.update_ride(
            created.id, {**ride_payload, "riderName": "Z", "endLat": -1}
        )

        assert updated.id == created.id
        assert updated.rider_name == "Z"
        assert updated.end_lat == -1
        assert updated.driver_name == created.driver_name
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at

    @pytest.mark.asyncio
    async def test_update_advances_even_when_clock_stalls(self, ride_service, ride_payload, monkeypatch):
        created = await ride_service.create_ride(ride_payload)
        monkeypatch.setattr(ride_service_module, "utcnow", lambda: created.updated_at)

        updated = await ride_service.update_ride(created.id, ride_payload)

        assert updated.updated_at == created.updated_at + timedelta(microseconds=1)

    @pytest.mark.asyncio
    async def test_update_missing_is_not_found_before_validation(self, ride_service):
        with pytest.raises(RideNotFoundError):
            await ride_service.update_ride(5, {"startLat": "bad"})

    @pytest.mark.asyncio
    async def test_update_uses_create_rules(self, ride_service, ride_payload):
        created = await ride_service.create_ride(ride_payload)

        with pytest.raises(RideValidationError) as exc_info:
            await ride_service.update_ride(created.id, {**ride_payload, "driverName": ""})

        assert exc_info.value.field == "driverName"
        assert (await ride_service.get_ride(created.id)).driver_name == "B"

    @pytest.mark.asyncio
    async def test_update_racing_delete(self, ride_payload):
        storage = MagicMock(spec=RideStorage)
        service = RideService(storage)
        storage.get_by_id.return_value = MagicMock(updated_at=ride_service_module.utcnow())
        storage.update_by_id.return_value = None

        with pytest.raises(RideNotFoundError):
            await service.update_ride(1, ride_payload)

    @pytest.mark.asyncio
    async def test_delete(self, ride_service, ride_payload):
        created = await ride_service.create_ride(ride_payload)

        assert await ride_service.delete_ride(created.id) is None

        with pytest.raises(RideNotFoundError):
            await ride_service.get_ride(created.id)
        with pytest.raises(RideNotFoundError):
            await ride_service.delete_ride(created.id)

    @pytest.mark.asyncio
    async def test_storage_failure_is_not_reinterpreted(self):
        storage = MagicMock(spec=RideStorage)
        storage.get_by_id.side_effect = StorageUnavailableError("boom")
        service = RideService(storage)

        with pytest.raises(StorageUnavailableError):
            await service.get_ride(1)
