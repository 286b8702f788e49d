"""
Team Cook API: Status Route
=============================

What:  Liveness endpoint for the mobile client and container health checks.
How:   Answers a literal `OK`; it does not touch the cache, the registry or
       the upstream API, and it is served outside the handler chain.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(prefix="/api", tags=["Status"])


@router.get(
    "/status",
    response_class=PlainTextResponse,
    summary="Service status",
    description="Returns `OK` while the server process is up.",
)
async def status() -> PlainTextResponse:
    return PlainTextResponse("OK")
