"""
Team Cook API: Ingredient Processor Handler
=============================================

What:  Gives every ingredient in a recipe response a stable ID and removes
       duplicate ingredients.
How:   Wrap handler. Calls `call_next()`, decodes the JSON body, runs the
       ingredient registry over each recipe's `extendedIngredients`, dedupes
       by final ID, then re-encodes the body.
Who:   Sits between the cache handler and the upstream proxy, so the cache
       only ever stores bodies with stable IDs.

Per recipe:
    1. every ingredient with id == -1 gets the registry's ID for its
       (name, originalName) pair
    2. ingredients sharing an ID after step 1 are collapsed, first one wins

List responses (/recipes/random) additionally pre-warm the cache: each
processed recipe is stored under /api/1/recipes/{id}/information, so opening
a recipe from the list is a cache hit.
"""

import json
import logging
from typing import Dict, List, Optional

from starlette.requests import Request
from starlette.responses import Response

from teamcook_api.chain.handler import CallNext, Handler
from teamcook_api.handlers.common import (
    RECIPE_INFORMATION_ROUTE,
    RECIPES_RANDOM_ROUTE,
    is_success,
    read_json,
    recipe_information_path,
    replace_json_body,
)
from teamcook_api.schemas.recipe import Ingredient, Recipe
from teamcook_api.services.cache_service import CacheService
from teamcook_api.services.ingredient_registry import IngredientRegistry

logger = logging.getLogger(__name__)


def dedupe_ingredients(ingredients: List[Ingredient]) -> List[Ingredient]:
    """Keep the first ingredient for each ID, preserving order."""
    seen = set()
    unique = []
    for ingredient in ingredients:
        ingredient_id = ingredient.get("id")
        if ingredient_id in seen:
            continue
        seen.add(ingredient_id)
        unique.append(ingredient)
    return unique


class IngredientProcessorHandler(Handler):
    """
    Args:
        registry: the process-wide IngredientRegistry
        cache:    CacheService used to pre-warm single-recipe keys
        ttl:      TTL in seconds for pre-warmed entries; None uses the default
    """

    name = "ingredient-processor"

    def __init__(
        self,
        registry: IngredientRegistry,
        cache: CacheService,
        ttl: Optional[float] = None,
    ):
        self.registry = registry
        self.cache = cache
        self.ttl = ttl
        super().__init__()

    def declare_routes(self):
        return {
            RECIPES_RANDOM_ROUTE: self.handle_recipe_list,
            RECIPE_INFORMATION_ROUTE: self.handle_recipe,
        }

    def process_recipe(self, recipe: Recipe) -> None:
        """Assign IDs to unknown ingredients, then dedupe by ID (in place)."""
        ingredients = recipe.get("extendedIngredients")
        if not isinstance(ingredients, list):
            return
        self.registry.process_ingredients(ingredients)
        recipe["extendedIngredients"] = dedupe_ingredients(ingredients)

    async def handle_recipe(
        self, request: Request, params: Dict[str, str], call_next: CallNext
    ) -> Response:
        response = await call_next()
        if not is_success(response):
            return response

        recipe = read_json(response)
        if isinstance(recipe, dict):
            self.process_recipe(recipe)
        return replace_json_body(response, recipe)

    async def handle_recipe_list(
        self, request: Request, params: Dict[str, str], call_next: CallNext
    ) -> Response:
        response = await call_next()
        if not is_success(response):
            return response

        body = read_json(response)
        recipes = body.get("recipes") if isinstance(body, dict) else None
        if isinstance(recipes, list):
            for recipe in recipes:
                if not isinstance(recipe, dict):
                    continue
                self.process_recipe(recipe)
                await self._prewarm(recipe)

        return replace_json_body(response, body)

    async def _prewarm(self, recipe: Recipe) -> None:
        recipe_id = recipe.get("id")
        # bool is an int subclass; a `true` id is not a recipe id
        if not isinstance(recipe_id, int) or isinstance(recipe_id, bool):
            return
        await self.cache.set(recipe_information_path(recipe_id), json.dumps(recipe), self.ttl)
        logger.debug("Pre-warmed cache for recipe %d", recipe_id)
