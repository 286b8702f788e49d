"""
Team Cook API: Handler Chain Route
====================================

What:  Catch-all GET route that hands every request not served by another
       router to the handler chain.
How:   Reads the chain built in the lifespan from `app.state.chain` and
       returns whatever it produces, including its 404 for unclaimed paths.
Who:   Mounted last in create_app(), after the status router.

Request Flow:
    GET /api/1/recipes/42/information
      → proxy_request()
      → HandlerChain.execute(request)
      → cache → ingredient-processor → spoonacular-proxy
"""

from fastapi import APIRouter, Request
from starlette.responses import Response

from teamcook_api.schemas.error import ErrorResponse

router = APIRouter(tags=["Recipes"])


@router.get(
    "/{full_path:path}",
    responses={
        200: {"description": "Upstream recipe JSON, with stable ingredient IDs"},
        404: {"description": "No handler claims this path"},
        500: {"description": "Unexpected server error", "model": ErrorResponse},
        502: {"description": "Recipe service unreachable", "model": ErrorResponse},
    },
    summary="Recipe API proxy",
    description=(
        "Serves /api/1/recipes/random, /api/1/recipes/{id}/information and "
        "/api/1/recipes/by-ingredients through the handler chain. Send "
        "`Cache-Control: no-cache` to skip the cache; the `X-Cache` response "
        "header reports HIT or MISS."
    ),
)
async def proxy_request(full_path: str, request: Request) -> Response:
    return await request.app.state.chain.execute(request)
