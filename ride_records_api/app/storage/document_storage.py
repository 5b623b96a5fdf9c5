"""
Document ride backend: a single JSON file.

The file holds the whole collection::

    {"autoIncrement": 3, "rides": [{"rideID": 1, "startLat": ..., "created": ...}, ...]}

Records use the key names of the original lowdb database: the id is
``rideID`` and the timestamps are ``created`` and ``updated``; the other
fields are camelCase as on the wire.  Files written with the API names
(``id``, ``createdAt``, ``updatedAt``) are read as well and rewritten
with the native names on the next write.

``autoIncrement`` is the next id to hand out.  Allocating an id,
appending the record and bumping the counter are written to disk in one
step: the new document goes to a temporary file in the same directory,
is fsynced and then ``os.replace``d over the old one.  The in-memory
copy is swapped only after the replace succeeded, so a failed write
leaves both disk and memory as they were.

All access goes through one lock per instance.  This serializes writers
within a process; pointing several processes at one file is not
supported.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.errors import StorageUnavailableError
from ..schemas.ride import Ride, RideInput
from .base import RideStorage

logger = logging.getLogger(__name__)

COUNTER_KEY = "autoIncrement"
RIDES_KEY = "rides"
ID_KEY = "rideID"

# API alias -> record key, where they differ.
RECORD_KEYS = {"id": ID_KEY, "createdAt": "created", "updatedAt": "updated"}


def _default_document() -> Dict[str, Any]:
    return {COUNTER_KEY: 1, RIDES_KEY: []}


class DocumentRideStorage(RideStorage):
    """Ride store backed by a JSON document file."""

    name = "document"

    def __init__(self, path: str):
        self.path = os.path.abspath(path)
        self._lock = threading.Lock()
        with self._lock:
            if os.path.exists(self.path):
                self._document = self._load()
            else:
                document = _default_document()
                self._write(document)
                self._document = document
        logger.info(
            "Document ride storage ready at %s (%d rides)",
            self.path,
            len(self._document[RIDES_KEY]),
        )

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                document = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.exception("Could not read ride document %s", self.path)
            raise StorageUnavailableError(f"Could not read ride document: {exc}") from exc

        if not isinstance(document, dict) or not isinstance(document.get(RIDES_KEY), list):
            raise StorageUnavailableError(f"Ride document {self.path} is corrupted")
        try:
            rides = [self._from_record(item) for item in document[RIDES_KEY]]
        except (TypeError, ValueError) as exc:
            raise StorageUnavailableError(f"Ride document {self.path} is corrupted") from exc

        highest = max((ride.id for ride in rides), default=0)
        counter = document.get(COUNTER_KEY)
        if not isinstance(counter, int) or isinstance(counter, bool) or counter <= highest:
            # A missing or stale counter must never hand out an existing id.
            logger.warning("Repairing ride counter in %s (was %r)", self.path, counter)
            counter = highest + 1
        return {COUNTER_KEY: counter, RIDES_KEY: [self._to_record(ride) for ride in rides]}

    def _write(self, document: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path)
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".rides-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, indent=2)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            logger.exception("Could not write ride document %s", self.path)
            raise StorageUnavailableError(f"Could not write ride document: {exc}") from exc

    def _commit(self, document: Dict[str, Any]) -> None:
        self._write(document)
        self._document = document

    @staticmethod
    def _to_record(ride: Ride) -> Dict[str, Any]:
        data = ride.model_dump(by_alias=True, mode="json")
        return {RECORD_KEYS.get(key, key): value for key, value in data.items()}

    @staticmethod
    def _from_record(record: Dict[str, Any]) -> Ride:
        data = dict(record)
        for alias, key in RECORD_KEYS.items():
            if key in data:
                data[alias] = data.pop(key)
        return Ride.model_validate(data)

    def _find_index(self, ride_id: int) -> Optional[int]:
        for index, record in enumerate(self._document[RIDES_KEY]):
            if record[ID_KEY] == ride_id:
                return index
        return None

    def next_id(self) -> int:
        """Return the id the next ``insert`` will allocate."""
        with self._lock:
            return self._document[COUNTER_KEY]

    def insert(self, data: RideInput, timestamp: datetime) -> Ride:
        with self._lock:
            ride_id = self._document[COUNTER_KEY]
            ride = Ride(id=ride_id, created_at=timestamp, updated_at=timestamp, **data.model_dump())
            self._commit(
                {
                    COUNTER_KEY: ride_id + 1,
                    RIDES_KEY: self._document[RIDES_KEY] + [self._to_record(ride)],
                }
            )
        return ride

    def list_all(self) -> List[Ride]:
        with self._lock:
            records = list(self._document[RIDES_KEY])
        return [self._from_record(record) for record in records]

    def list_window(self, offset: int, limit: int) -> List[Ride]:
        if limit <= 0:
            return []
        start = max(offset, 0)
        with self._lock:
            records = self._document[RIDES_KEY][start:start + limit]
        return [self._from_record(record) for record in records]

    def get_by_id(self, ride_id: int) -> Optional[Ride]:
        with self._lock:
            index = self._find_index(ride_id)
            record = self._document[RIDES_KEY][index] if index is not None else None
        return self._from_record(record) if record is not None else None

    def update_by_id(self, ride_id: int, data: RideInput, timestamp: datetime) -> Optional[Ride]:
        with self._lock:
            index = self._find_index(ride_id)
            if index is None:
                return None
            current = self._from_record(self._document[RIDES_KEY][index])
            ride = current.model_copy(update={**data.model_dump(), "updated_at": timestamp})
            rides = list(self._document[RIDES_KEY])
            rides[index] = self._to_record(ride)
            self._commit({COUNTER_KEY: self._document[COUNTER_KEY], RIDES_KEY: rides})
        return ride

    def delete_by_id(self, ride_id: int) -> bool:
        with self._lock:
            index = self._find_index(ride_id)
            if index is None:
                return False
            rides = list(self._document[RIDES_KEY])
            del rides[index]
            self._commit({COUNTER_KEY: self._document[COUNTER_KEY], RIDES_KEY: rides})
        return True

    def count_all(self) -> int:
        with self._lock:
            return len(self._document[RIDES_KEY])
