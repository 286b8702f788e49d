"""
Team Cook API: Cache Handler
==============================

What:  Serves recipe responses from the persistent cache and stores fresh
       successful responses in it.
How:   Wrap handler. On a hit it answers without calling the rest of the
       chain; on a miss it calls `call_next()` and stores the 2xx body.
Who:   Outermost caching layer of the chain (see build_handler_chain).

Behavior per request:
    Cache-Control: no-cache  → skip the read, still store the fresh body
    hit                      → stored body, X-Cache: HIT
    miss + 2xx downstream    → store body under the same key, X-Cache: MISS
    miss + non-2xx           → returned untouched, nothing stored

Only the random-recipes and recipe-information routes are cached; every
other path (including /recipes/by-ingredients) passes straight through.
"""

import logging
from typing import Dict, Optional

from starlette.requests import Request
from starlette.responses import Response

from teamcook_api.chain.handler import CallNext, Handler
from teamcook_api.handlers.common import (
    JSON_MEDIA_TYPE,
    RECIPE_INFORMATION_ROUTE,
    RECIPES_RANDOM_ROUTE,
    is_success,
    request_cache_key,
)
from teamcook_api.services.cache_service import CacheService

logger = logging.getLogger(__name__)

CACHE_STATUS_HEADER = "X-Cache"


def wants_cache_bypass(request: Request) -> bool:
    """True when the client sent `Cache-Control: no-cache`."""
    return "no-cache" in request.headers.get("cache-control", "").lower()


class CacheHandler(Handler):
    """
    Args:
        cache: the process-wide CacheService
        ttl:   TTL in seconds for stored bodies; None uses the cache default
    """

    name = "cache"

    def __init__(self, cache: CacheService, ttl: Optional[float] = None):
        self.cache = cache
        self.ttl = ttl
        super().__init__()

    def declare_routes(self):
        return {
            RECIPES_RANDOM_ROUTE: self.handle,
            RECIPE_INFORMATION_ROUTE: self.handle,
        }

    async def handle(
        self, request: Request, params: Dict[str, str], call_next: CallNext
    ) -> Response:
        key = request_cache_key(request)

        if wants_cache_bypass(request):
            logger.info("%s %s -> cache bypass requested", request.method, request.url.path)
        else:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.info("%s %s -> cache hit", request.method, request.url.path)
                return Response(
                    content=cached,
                    media_type=JSON_MEDIA_TYPE,
                    headers={CACHE_STATUS_HEADER: "HIT"},
                )

        response = await call_next()

        if not is_success(response):
            return response

        await self.cache.set(key, response.body.decode("utf-8"), self.ttl)
        response.headers[CACHE_STATUS_HEADER] = "MISS"
        logger.info("%s %s -> cache miss", request.method, request.url.path)
        return response
