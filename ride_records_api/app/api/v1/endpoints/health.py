"""
Health endpoint.

Answers ``Healthy`` in plain text as long as the process is serving
requests.  It does not touch storage.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    return "Healthy"
