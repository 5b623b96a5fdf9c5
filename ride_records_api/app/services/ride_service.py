"""
Business logic for rides.

``RideService`` wires the validator, the paginator and a storage
backend together.  It keeps no state of its own between calls: the
backend is injected once at startup and every operation works on the
copies the backend returns.

Storage methods are blocking, so they run in FastAPI's thread pool; a
slow disk only holds up the request waiting for it.  Validation and
page arithmetic happen before any storage call, so bad input never
reaches the backend.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool

from ..core.errors import EmptyCollectionError, RideNotFoundError
from ..schemas.ride import Ride, RidesPage
from ..storage.base import RideStorage
from .pagination import paginate, parse_page_params
from .ride_validator import validate_ride_payload

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RideService:
    """Create, list, fetch, update and delete rides."""

    def __init__(self, storage: RideStorage, default_page_size: int = 10, max_page_size: int = 100):
        self.storage = storage
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def create_ride(self, payload: Any) -> Ride:
        """Validate ``payload`` and store it as a new ride.

        Both timestamps are set to the current time; the backend
        allocates the id.
        """
        data = validate_ride_payload(payload)
        ride = await run_in_threadpool(self.storage.insert, data, utcnow())
        logger.info("Created ride %s for rider '%s'", ride.id, ride.rider_name)
        return ride

    async def list_rides(self, page: Any = None, limit: Any = None) -> RidesPage:
        """Return one page of rides in insertion order.

        Raises ``EmptyCollectionError`` when nothing is stored at all.
        A page past the end of a non-empty collection is an empty page,
        with ``previous`` pointing back.
        """
        page_number, page_size = parse_page_params(
            page, limit, self.default_page_size, self.max_page_size
        )
        total = await run_in_threadpool(self.storage.count_all)
        if total == 0:
            raise EmptyCollectionError()

        window = paginate(total, page_number, page_size)
        rides = []
        if window.size > 0:
            rides = await run_in_threadpool(self.storage.list_window, window.start, window.size)
        return RidesPage(previous=window.previous, next=window.next, rides=rides)

    async def get_ride(self, ride_id: int) -> Ride:
        ride = await run_in_threadpool(self.storage.get_by_id, ride_id)
        if ride is None:
            raise RideNotFoundError(ride_id)
        return ride

    async def update_ride(self, ride_id: int, payload: Any) -> Ride:
        """Replace every mutable field of an existing ride.

        The id is checked first so a missing ride is reported as not
        found even when the payload is also invalid.  ``updated_at``
        always moves strictly forward.
        """
        existing = await self.get_ride(ride_id)
        data = validate_ride_payload(payload)
        timestamp = self._next_timestamp(existing.updated_at)
        ride: Optional[Ride] = await run_in_threadpool(
            self.storage.update_by_id, ride_id, data, timestamp
        )
        if ride is None:
            # Deleted between the lookup and the update.
            raise RideNotFoundError(ride_id)
        logger.info("Updated ride %s", ride_id)
        return ride

    async def delete_ride(self, ride_id: int) -> None:
        await self.get_ride(ride_id)
        deleted = await run_in_threadpool(self.storage.delete_by_id, ride_id)
        if not deleted:
            raise RideNotFoundError(ride_id)
        logger.info("Deleted ride %s", ride_id)

    @staticmethod
    def _next_timestamp(previous: datetime) -> datetime:
        now = utcnow()
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        return now
