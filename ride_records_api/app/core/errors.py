"""
Error taxonomy for the ride domain.

Every failure the service reports is a subclass of ``RideError``.  Each
class carries the ``error_code`` sent to clients and the HTTP status
the API layer answers with, so handlers never have to guess how to
translate an exception.
"""

from typing import Any, Dict, Optional


class RideError(Exception):
    """Base class for all domain errors."""

    error_code = "SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        """Extra fields included in the error response."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error_code": self.error_code, "message": self.message}
        payload.update(self.details())
        return payload


class RideValidationError(RideError):
    """Client supplied data that violates a domain rule.

    ``rule`` identifies the check that failed (``NOT_A_NUMBER``,
    ``LATITUDE_OUT_OF_RANGE``, ``LONGITUDE_OUT_OF_RANGE``,
    ``EMPTY_FIELD``, ``INVALID_PAGE``, ``INVALID_LIMIT``) and ``field``
    the offending input, when there is one.
    """

    error_code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, rule: str, message: str, field: Optional[str] = None):
        self.rule = rule
        self.field = field
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {"rule": self.rule}
        if self.field is not None:
            details["field"] = self.field
        return details


class RideNotFoundError(RideError):
    """The referenced ride id does not exist."""

    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, ride_id: int, message: Optional[str] = None):
        self.ride_id = ride_id
        super().__init__(message or f"There is no ride with ID = {ride_id}")

    def details(self) -> Dict[str, Any]:
        return {"id": self.ride_id}


class EmptyCollectionError(RideError):
    """A listing was requested while no rides are stored."""

    error_code = "EMPTY_COLLECTION"
    status_code = 404

    def __init__(self, message: str = "Could not find any rides"):
        super().__init__(message)


class StorageUnavailableError(RideError):
    """The storage backend failed (disk, corrupted file, lost connection)."""

    error_code = "STORAGE_UNAVAILABLE"
    status_code = 503

    def __init__(self, message: str = "Ride storage is unavailable"):
        super().__init__(message)
