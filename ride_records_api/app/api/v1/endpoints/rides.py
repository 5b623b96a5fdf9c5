"""
Ride endpoints for API v1.

CRUD routes over ``RideService``.  Request bodies are taken as raw JSON
objects and handed to the service, which applies the ride validation
rules itself so the create and update paths report identical errors.
Domain errors propagate as ``RideError`` and are rendered by the
exception handler registered in ``main.py``.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from fastapi.responses import PlainTextResponse

from ride_records_api.app.schemas.ride import Ride, RidesPage
from ride_records_api.app.services.ride_service import RideService

router = APIRouter()

RIDE_BODY_EXAMPLE = {
    "startLat": 14.521997999,
    "startLong": -75.817663343,
    "endLat": 14.521997912,
    "endLong": -75.817663396,
    "riderName": "Hector Barbossa",
    "driverName": "Jack Sparrow",
    "driverVehicle": "Black Pearl",
}


def get_ride_service(request: Request) -> RideService:
    """Return the service constructed at startup."""
    return request.app.state.ride_service


@router.get("/health", response_class=PlainTextResponse, tags=["health"])
async def rides_health() -> str:
    return "Healthy"


@router.post("", response_model=Ride, status_code=status.HTTP_201_CREATED)
async def create_ride(
    payload: Dict[str, Any] = Body(..., examples=[RIDE_BODY_EXAMPLE]),
    service: RideService = Depends(get_ride_service),
) -> Ride:
    """Create a new ride.

    Coordinates may be numbers or numeric strings; the three names must
    be non-empty strings.  The id and both timestamps are assigned by
    the server.
    """
    return await service.create_ride(payload)


@router.get("", response_model=RidesPage, response_model_exclude_none=True)
async def list_rides(
    page: Optional[str] = Query(None, description="1-based page number, defaults to 1"),
    limit: Optional[str] = Query(None, description="Page size, defaults to the configured page size"),
    service: RideService = Depends(get_ride_service),
) -> RidesPage:
    """Return a page of rides in creation order.

    ``previous`` and ``next`` are only present when such a page exists.
    Listing an empty store answers 404 with ``EMPTY_COLLECTION``.
    """
    return await service.list_rides(page=page, limit=limit)


@router.get("/{ride_id}", response_model=Ride)
async def get_ride(ride_id: int, service: RideService = Depends(get_ride_service)) -> Ride:
    return await service.get_ride(ride_id)


@router.put("/{ride_id}", response_model=Ride)
async def update_ride(
    ride_id: int,
    payload: Dict[str, Any] = Body(..., examples=[RIDE_BODY_EXAMPLE]),
    service: RideService = Depends(get_ride_service),
) -> Ride:
    """Replace all fields of a ride except its id and creation time."""
    return await service.update_ride(ride_id, payload)


@router.delete("/{ride_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ride(ride_id: int, service: RideService = Depends(get_ride_service)) -> Response:
    await service.delete_ride(ride_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
