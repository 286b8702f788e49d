"""
Team Cook API: Shared Handler Helpers
=======================================

What:  Route patterns, cache-key rules and response helpers used by more
       than one handler.
"""

import json
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

# ── Inbound routes ────────────────────────────────────────────────────────
RECIPES_RANDOM_ROUTE = "/api/1/recipes/random"
RECIPE_INFORMATION_ROUTE = "/api/1/recipes/:id/information"
RECIPES_BY_INGREDIENTS_ROUTE = "/api/1/recipes/by-ingredients"

JSON_MEDIA_TYPE = "application/json"

# Headers recomputed whenever a handler replaces the body
_BODY_HEADERS = {"content-length", "content-type"}


def recipe_information_path(recipe_id: int) -> str:
    """Inbound path (and, without a query, cache key) of one recipe."""
    return f"/api/1/recipes/{recipe_id}/information"


def request_cache_key(request: Request) -> str:
    """
    Path followed by the raw query string, exactly as the client sent it.

    Parameters are not sorted: `?a=1&b=2` and `?b=2&a=1` are different keys.
    """
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def is_success(response: Response) -> bool:
    return 200 <= response.status_code < 300


def read_json(response: Response) -> Any:
    return json.loads(response.body)


def replace_json_body(response: Response, payload: Any) -> Response:
    """
    A copy of `response` with `payload` as its JSON body.

    Status and non-body headers (e.g. X-Cache) carry over.
    """
    rebuilt = Response(
        content=json.dumps(payload),
        status_code=response.status_code,
        media_type=JSON_MEDIA_TYPE,
    )
    for name, value in response.headers.items():
        if name not in _BODY_HEADERS:
            rebuilt.headers.append(name, value)
    return rebuilt
