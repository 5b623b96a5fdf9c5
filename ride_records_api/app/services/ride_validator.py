"""
Validation of ride payloads.

``validate_ride_payload`` is shared by the create and update paths so
both enforce exactly the same rules.  Checks run in a fixed order and
the first failure is reported on its own:

1. all four coordinates coerce to finite numbers;
2. the start point is within bounds (latitude, then longitude);
3. the end point is within bounds (latitude, then longitude);
4. ``riderName``, ``driverName`` and ``driverVehicle`` are non-empty
   strings.

Coordinates may be sent as numbers or numeric strings.  Names are never
coerced: a number where a name is expected is rejected.
"""

import math
import re
from typing import Any, Mapping, Optional

from ..core.errors import RideValidationError
from ..schemas.ride import RideInput

NOT_A_NUMBER = "NOT_A_NUMBER"
LATITUDE_OUT_OF_RANGE = "LATITUDE_OUT_OF_RANGE"
LONGITUDE_OUT_OF_RANGE = "LONGITUDE_OUT_OF_RANGE"
EMPTY_FIELD = "EMPTY_FIELD"

COORDINATE_FIELDS = ("startLat", "startLong", "endLat", "endLong")

# Clients of the relational API send snake_case keys.
LEGACY_KEYS = {
    "startLat": "start_lat",
    "startLong": "start_long",
    "endLat": "end_lat",
    "endLong": "end_long",
    "riderName": "rider_name",
    "driverName": "driver_name",
    "driverVehicle": "driver_vehicle",
}

TEXT_FIELDS = (
    ("riderName", "Rider name"),
    ("driverName", "Driver name"),
    ("driverVehicle", "Driver vehicle"),
)

_MISSING = object()

# Plain ASCII decimal notation only; no digit-group underscores or other scripts.
NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _lookup(payload: Mapping[str, Any], key: str) -> Any:
    if key in payload:
        return payload[key]
    return payload.get(LEGACY_KEYS[key], _MISSING)


def _to_number(value: Any) -> Optional[float]:
    """Coerce ``value`` to a finite float, or return ``None``."""
    # bool is an int subclass; True is not a coordinate.
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        text = value
    elif isinstance(value, str):
        text = value.strip()
        if not NUMBER_PATTERN.fullmatch(text):
            return None
    else:
        return None
    try:
        number = float(text)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _is_text(value: Any) -> bool:
    """True for a non-blank string that is valid Unicode (no lone surrogates)."""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _check_point(label: str, lat: float, long: float, prefix: str) -> None:
    if lat < -90 or lat > 90:
        raise RideValidationError(
            LATITUDE_OUT_OF_RANGE,
            f"{label} latitude must be between -90 and 90 degrees",
            field=f"{prefix}Lat",
        )
    if long < -180 or long > 180:
        raise RideValidationError(
            LONGITUDE_OUT_OF_RANGE,
            f"{label} longitude must be between -180 and 180 degrees",
            field=f"{prefix}Long",
        )


def validate_ride_payload(payload: Any) -> RideInput:
    """Validate a raw ride payload and return the normalized input.

    Raises
    ------
    RideValidationError
        On the first rule the payload violates.
    """
    if not isinstance(payload, Mapping):
        raise RideValidationError(
            NOT_A_NUMBER, "Latitudes and longitudes must be numbers", field="startLat"
        )

    coordinates = {}
    for key in COORDINATE_FIELDS:
        number = _to_number(_lookup(payload, key))
        if number is None:
            raise RideValidationError(
                NOT_A_NUMBER, "Latitudes and longitudes must be numbers", field=key
            )
        coordinates[key] = number

    _check_point("Start", coordinates["startLat"], coordinates["startLong"], "start")
    _check_point("End", coordinates["endLat"], coordinates["endLong"], "end")

    texts = {}
    for key, label in TEXT_FIELDS:
        value = _lookup(payload, key)
        if not _is_text(value):
            raise RideValidationError(
                EMPTY_FIELD, f"{label} must be a non empty string", field=key
            )
        texts[key] = value.strip()

    return RideInput(
        start_lat=coordinates["startLat"],
        start_long=coordinates["startLong"],
        end_lat=coordinates["endLat"],
        end_long=coordinates["endLong"],
        rider_name=texts["riderName"],
        driver_name=texts["driverName"],
        driver_vehicle=texts["driverVehicle"],
    )
