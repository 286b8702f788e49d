"""
Team Cook API: Spoonacular Proxy Handler
==========================================

What:  Forwards recipe requests to the Spoonacular API and returns its
       response unchanged.
How:   Terminal handler: it never calls `call_next()`. Builds the upstream
       URL from the configured base and the endpoint of the matched route,
       forwards the client's query parameters, appends `apiKey`, and issues
       a GET through the shared httpx.AsyncClient.
Who:   Innermost handler of the chain.

Route table:
    /api/1/recipes/random           → /recipes/random
    /api/1/recipes/:id/information  → /recipes/{id}/information
    /api/1/recipes/by-ingredients   → /recipes/findByIngredients

Query parameters:
    Client parameters are forwarded verbatim and in order. `apiKey` is set
    last and any client-supplied `apiKey` is dropped, so the proxy's
    credential always wins.

Error handling:
    Upstream 4xx/5xx → returned as-is (status + body); the wrap handlers
                       above check for 2xx before touching it
    Transport error  → UpstreamUnavailableError (502), nothing is retried
"""

import logging
import time
from typing import Dict, List, Tuple
from urllib.parse import quote

import httpx
from starlette.requests import Request
from starlette.responses import Response

from teamcook_api.chain.handler import CallNext, Handler
from teamcook_api.exceptions import UpstreamUnavailableError
from teamcook_api.handlers.common import (
    RECIPE_INFORMATION_ROUTE,
    RECIPES_BY_INGREDIENTS_ROUTE,
    RECIPES_RANDOM_ROUTE,
)

logger = logging.getLogger(__name__)

API_KEY_PARAM = "apiKey"

# Inbound pattern → upstream endpoint template (captures fill the braces)
UPSTREAM_ENDPOINTS = {
    RECIPES_RANDOM_ROUTE: "/recipes/random",
    RECIPE_INFORMATION_ROUTE: "/recipes/{id}/information",
    RECIPES_BY_INGREDIENTS_ROUTE: "/recipes/findByIngredients",
}


class SpoonacularProxyHandler(Handler):
    """
    Args:
        http_client: shared AsyncClient; its timeout applies to every call
        base_url:    upstream base, e.g. https://api.spoonacular.com
        api_key:     credential sent as the `apiKey` query parameter
    """

    name = "spoonacular-proxy"

    def __init__(self, http_client: httpx.AsyncClient, base_url: str, api_key: str):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        super().__init__()

    def declare_routes(self):
        return {
            pattern: self._route_to(template)
            for pattern, template in UPSTREAM_ENDPOINTS.items()
        }

    def _route_to(self, endpoint_template: str):
        async def route(request: Request, params: Dict[str, str], call_next: CallNext) -> Response:
            endpoint = endpoint_template.format(
                **{name: quote(value, safe="") for name, value in params.items()}
            )
            return await self.proxy(request, endpoint)

        return route

    def upstream_params(self, request: Request) -> List[Tuple[str, str]]:
        """Client query parameters in order, minus any apiKey, plus ours last."""
        forwarded = [
            (name, value)
            for name, value in request.query_params.multi_items()
            if name != API_KEY_PARAM
        ]
        forwarded.append((API_KEY_PARAM, self.api_key))
        return forwarded

    async def proxy(self, request: Request, endpoint: str) -> Response:
        url = f"{self.base_url}{endpoint}"
        start_time = time.perf_counter()

        try:
            upstream = await self.http_client.get(url, params=self.upstream_params(request))
        except httpx.HTTPError as e:
            logger.error(
                "%s %s -> upstream %s unreachable: %s",
                request.method,
                request.url.path,
                endpoint,
                type(e).__name__,
            )
            raise UpstreamUnavailableError(
                context={"endpoint": endpoint, "error_type": type(e).__name__}
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        if upstream.is_success:
            logger.info(
                "%s %s -> %s (proxied, %.0fms)",
                request.method,
                request.url.path,
                endpoint,
                duration_ms,
            )
        else:
            logger.warning(
                "%s %s -> upstream %d %s",
                request.method,
                request.url.path,
                upstream.status_code,
                upstream.reason_phrase,
            )

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            media_type=upstream.headers.get("content-type"),
        )
