"""
Team Cook API: Love Ingredient Handler
========================================

What:  Appends the secret ingredient, "a lot of love", to every recipe.
How:   Wrap handler over the same two recipe routes as the ingredient
       processor. The ingredient's ID comes from the registry, so it is
       stable and never collides with a real ingredient.

The addition is ephemeral. When enabled, this handler is mounted OUTSIDE the
cache handler, so it rewrites the response on its way out after caching has
already happened; the stored bodies never contain the extra ingredient and
cache hits get it appended again.
"""

from typing import Dict

from starlette.requests import Request
from starlette.responses import Response

from teamcook_api.chain.handler import CallNext, Handler
from teamcook_api.handlers.common import (
    RECIPE_INFORMATION_ROUTE,
    RECIPES_RANDOM_ROUTE,
    is_success,
    read_json,
    replace_json_body,
)
from teamcook_api.schemas.recipe import Ingredient, Recipe
from teamcook_api.services.ingredient_registry import IngredientRegistry

LOVE_INGREDIENT_NAME = "a lot of love"


class LoveIngredientHandler(Handler):
    name = "love-ingredient"

    def __init__(self, registry: IngredientRegistry):
        self.registry = registry
        super().__init__()

    def declare_routes(self):
        return {
            RECIPES_RANDOM_ROUTE: self.handle_recipe_list,
            RECIPE_INFORMATION_ROUTE: self.handle_recipe,
        }

    def love_ingredient(self) -> Ingredient:
        return {
            "id": self.registry.assign_or_lookup(LOVE_INGREDIENT_NAME, LOVE_INGREDIENT_NAME),
            "name": LOVE_INGREDIENT_NAME,
            "originalName": LOVE_INGREDIENT_NAME,
            "measures": {},
            "consistency": "IMMATERIAL",
        }

    def inject_love(self, recipe: Recipe) -> None:
        if not isinstance(recipe.get("extendedIngredients"), list):
            recipe["extendedIngredients"] = []
        recipe["extendedIngredients"].append(self.love_ingredient())

    async def handle_recipe(
        self, request: Request, params: Dict[str, str], call_next: CallNext
    ) -> Response:
        response = await call_next()
        if not is_success(response):
            return response

        recipe = read_json(response)
        if isinstance(recipe, dict):
            self.inject_love(recipe)
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
                if isinstance(recipe, dict):
                    self.inject_love(recipe)
        return replace_json_body(response, body)
