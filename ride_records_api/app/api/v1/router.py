"""
Top-level router for version 1 of the API.

Aggregates the domain routers under one ``APIRouter`` which ``main.py``
mounts at ``Settings.api_prefix``.
"""

from fastapi import APIRouter

from .endpoints import health, rides

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(rides.router, prefix="/rides", tags=["rides"])
