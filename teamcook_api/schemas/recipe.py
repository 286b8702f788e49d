"""
Team Cook API: Recipe Wire Shapes
===================================

What:  Typed views of the upstream Spoonacular JSON this service rewrites.
How:   TypedDicts, not Pydantic models. Payloads are decoded with `json`,
       edited in place and re-encoded; every field the service does not know
       about must come out exactly as it went in, so nothing is validated or
       coerced.

Fields the service touches:
    Ingredient.id                  rewritten when it is -1
    Recipe.extendedIngredients     deduplicated by id, optionally extended
    Recipe.id                      used to build per-recipe cache keys
    RecipeList.recipes             list responses from /recipes/random
"""

from typing import Dict, List, TypedDict


class Measure(TypedDict, total=False):
    amount: float
    unitShort: str
    unitLong: str


class Ingredient(TypedDict, total=False):
    id: int
    name: str
    originalName: str
    consistency: str
    measures: Dict[str, Measure]


class Recipe(TypedDict, total=False):
    id: int
    extendedIngredients: List[Ingredient]


class RecipeList(TypedDict, total=False):
    recipes: List[Recipe]
