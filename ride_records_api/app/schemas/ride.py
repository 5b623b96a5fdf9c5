"""
Pydantic models for ride data.

``RideInput`` holds the seven client-supplied fields after validation,
``Ride`` is a stored record and ``RidesPage`` is one page of a listing.
Python attributes use snake_case; on the wire every field is rendered
in camelCase (``startLat``, ``riderName``, ``createdAt`` ...).  The
document store keeps its own key names; see ``storage.document_storage``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RideInput(BaseModel):
    """Normalized ride payload produced by the validator."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    start_lat: float = Field(..., ge=-90, le=90, examples=[35.147567])
    start_long: float = Field(..., ge=-180, le=180, examples=[33.34585])
    end_lat: float = Field(..., ge=-90, le=90, examples=[35.147519])
    end_long: float = Field(..., ge=-180, le=180, examples=[33.345936])
    rider_name: str = Field(..., min_length=1, examples=["John Doe"])
    driver_name: str = Field(..., min_length=1, examples=["John Wick"])
    driver_vehicle: str = Field(..., min_length=1, examples=["Ford Mustang"])


class Ride(RideInput):
    """A stored ride.

    Instances are frozen; storage backends hand out fresh copies and
    nobody mutates a record in place.
    """

    id: int = Field(..., ge=1, examples=[1])
    created_at: datetime
    updated_at: datetime


class PageRef(BaseModel):
    """Reference to a neighbouring page of a listing."""

    page: int = Field(..., ge=1, examples=[2])
    limit: int = Field(..., ge=1, examples=[3])


class RidesPage(BaseModel):
    """One page of rides with optional links to its neighbours."""

    previous: Optional[PageRef] = None
    next: Optional[PageRef] = None
    rides: List[Ride]
