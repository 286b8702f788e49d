"""
Team Cook API: Ingredient Identity Registry
=============================================

What:  Assigns stable numeric IDs to ingredients the upstream API does not
       know (reported with id == -1).
How:   A dedupe key `lower(name)|lower(originalName)` maps to an ID allocated
       from a counter that starts just above the highest ID in the reference
       dataset, so generated IDs never collide with catalog IDs.
Who:   The ingredient-processor handler (every recipe response) and the
       love-ingredient handler (its synthetic ingredient).
When:  Seeded once in the lifespan; consulted on every recipe response.

Guarantees (for the lifetime of the process):
    - Same dedupe key → same ID, every time.
    - Different dedupe keys → different IDs.
    - Every generated ID > seed, handed out as seed+1, seed+2, ... in
      allocation order.

Known limitation:
    The mapping lives in memory only. A restart resets the counter, so an
    ingredient may receive a different ID than before the restart. Cached
    payloads keep the old IDs until their TTL runs out.

Concurrency:
    `assign_or_lookup` contains no await, so under asyncio the lookup and the
    allocation cannot interleave with another request. The lock makes the
    same guarantee hold when it is called from worker threads.
"""

import logging
import threading
from typing import Dict, List

import aiofiles

from teamcook_api.exceptions import ConfigurationError
from teamcook_api.schemas.recipe import Ingredient

logger = logging.getLogger(__name__)

# Upstream marker for "no catalog identifier yet"
UNKNOWN_INGREDIENT_ID = -1

# Joins name and originalName in the dedupe key; not expected in either
DEDUPE_KEY_SEPARATOR = "|"


def dedupe_key(name: str, original_name: str) -> str:
    """Case-insensitive identity of an ingredient as written in a recipe."""
    return f"{name.lower()}{DEDUPE_KEY_SEPARATOR}{original_name.lower()}"


def max_reference_id(lines) -> int:
    """
    Highest integer in the second `;`-separated field of `lines`.

    Lines with a missing or non-integer second field (headers, blank lines)
    are skipped. Returns 0 when no line carries an ID.
    """
    max_id = 0
    for line in lines:
        parts = line.strip().split(";")
        if len(parts) < 2:
            continue
        try:
            ingredient_id = int(parts[1].strip())
        except ValueError:
            continue
        if ingredient_id > max_id:
            max_id = ingredient_id
    return max_id


async def load_reference_seed(path: str) -> int:
    """
    What:  Reads the reference dataset and returns its maximum ingredient ID.
    When:  Once, in the lifespan, before the handler chain is built.

    Raises:
        ConfigurationError: the dataset is missing or unreadable. Without it
            generated IDs could collide with catalog IDs, so startup stops.
    """
    try:
        async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
            content = await f.read()
    except OSError as e:
        raise ConfigurationError(
            f"Ingredient reference dataset could not be read: {path}",
            context={"path": path, "error": str(e)},
        ) from e

    return max_reference_id(content.splitlines())


class IngredientRegistry:
    """
    In-memory bijection between ingredient dedupe keys and generated IDs.

    Args:
        seed: maximum known catalog ID; the first generated ID is seed + 1
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._next_id = seed + 1
        self._assigned: Dict[str, int] = {}
        self._lock = threading.Lock()

        logger.info(
            "Ingredient registry seeded: max reference ID %d, next ID will be %d",
            seed,
            self._next_id,
        )

    @classmethod
    async def from_reference_dataset(cls, path: str) -> "IngredientRegistry":
        """Builds a registry seeded from the dataset at `path`."""
        return cls(seed=await load_reference_seed(path))

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._assigned)

    def assign_or_lookup(self, name: str, original_name: str) -> int:
        """
        Return the ID for (name, original_name), allocating one on first sight.

        Lookup and allocation happen under one lock with no suspension point,
        so two requests seeing the same new ingredient get the same ID.
        """
        key = dedupe_key(name, original_name)
        with self._lock:
            assigned_id = self._assigned.get(key)
            if assigned_id is None:
                assigned_id = self._next_id
                self._next_id += 1
                self._assigned[key] = assigned_id
                logger.info("Assigned new ingredient ID %d to %r", assigned_id, name)
        return assigned_id

    def process_ingredients(self, ingredients: List[Ingredient]) -> None:
        """
        Replace the sentinel ID of every unknown ingredient, in place.

        Entries whose `id` is anything other than UNKNOWN_INGREDIENT_ID are
        left exactly as they are.
        """
        for ingredient in ingredients:
            if ingredient.get("id") != UNKNOWN_INGREDIENT_ID:
                continue
            ingredient["id"] = self.assign_or_lookup(
                ingredient.get("name") or "",
                ingredient.get("originalName") or "",
            )
