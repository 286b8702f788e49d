# Handlers package init
"""
Team Cook API: Request Handlers
=================================

What:  The concrete handlers of the request pipeline and the function that
       assembles them into a chain.

Handler Chain (order matters!):
    Request → [Love?] → [Cache] → [Ingredient Processor] → [Spoonacular Proxy]

    1. Love ingredient (optional): outermost, so its addition is applied
       after all caching and never stored
    2. Cache: answers hits immediately; stores whatever comes back on a miss
    3. Ingredient processor: stable IDs + dedupe, pre-warms per-recipe keys
    4. Spoonacular proxy: terminal, performs the upstream call

    Responses travel back in reverse order, so each wrap handler sees the
    output of everything below it.
"""

from typing import Optional

import httpx

from teamcook_api.chain.executor import HandlerChain
from teamcook_api.handlers.cache import CacheHandler
from teamcook_api.handlers.ingredient_processor import IngredientProcessorHandler
from teamcook_api.handlers.love_ingredient import LoveIngredientHandler
from teamcook_api.handlers.spoonacular_proxy import SpoonacularProxyHandler
from teamcook_api.services.cache_service import CacheService
from teamcook_api.services.ingredient_registry import IngredientRegistry

__all__ = [
    "CacheHandler",
    "IngredientProcessorHandler",
    "LoveIngredientHandler",
    "SpoonacularProxyHandler",
    "build_handler_chain",
]


def build_handler_chain(
    cache: CacheService,
    registry: IngredientRegistry,
    http_client: httpx.AsyncClient,
    upstream_base_url: str,
    api_key: str,
    cache_ttl: Optional[float] = None,
    enable_love_ingredient: bool = False,
) -> HandlerChain:
    """
    What:  Builds the production chain from already-constructed services.
    When:  Once, in the lifespan. Tests call it with a temporary cache and a
           mock-transport HTTP client.
    """
    handlers = []
    if enable_love_ingredient:
        handlers.append(LoveIngredientHandler(registry))
    handlers.extend([
        CacheHandler(cache, ttl=cache_ttl),
        IngredientProcessorHandler(registry, cache, ttl=cache_ttl),
        SpoonacularProxyHandler(http_client, base_url=upstream_base_url, api_key=api_key),
    ])
    return HandlerChain(handlers)
