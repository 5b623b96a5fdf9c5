"""
Storage contract shared by every ride backend.

A backend persists ``Ride`` records keyed by a unique integer id.  The
id is allocated by the backend itself as part of ``insert``, either
through the engine's native auto-increment or through a counter that is
persisted in the same atomic write as the record.  Ids are strictly
increasing and never reused, even after a delete.

All methods are synchronous and safe to call from several threads.
Any I/O failure is raised as ``StorageUnavailableError``; a failure is
never reported as an empty result or a missing record.
"""

import abc
from datetime import datetime
from typing import List, Optional

from ..schemas.ride import Ride, RideInput


class RideStorage(abc.ABC):
    """Abstract ride store."""

    name = "abstract"

    @abc.abstractmethod
    def insert(self, data: RideInput, timestamp: datetime) -> Ride:
        """Allocate an id and persist a new ride.

        ``created_at`` and ``updated_at`` are both set to ``timestamp``.
        The record is durable before this returns.
        """

    @abc.abstractmethod
    def list_all(self) -> List[Ride]:
        """Return every ride in ascending id order."""

    @abc.abstractmethod
    def list_window(self, offset: int, limit: int) -> List[Ride]:
        """Return ``list_all()[offset:offset + limit]`` without loading the rest where possible."""

    @abc.abstractmethod
    def get_by_id(self, ride_id: int) -> Optional[Ride]:
        """Return the ride or ``None`` if it does not exist."""

    @abc.abstractmethod
    def update_by_id(self, ride_id: int, data: RideInput, timestamp: datetime) -> Optional[Ride]:
        """Replace every mutable field and set ``updated_at`` in one atomic step.

        Returns the updated ride, or ``None`` if the id does not exist.
        """

    @abc.abstractmethod
    def delete_by_id(self, ride_id: int) -> bool:
        """Remove the ride; return ``False`` if it did not exist."""

    @abc.abstractmethod
    def count_all(self) -> int:
        """Return the number of stored rides."""

    def close(self) -> None:
        """Release any resources held by the backend."""
