# Services package init
"""
Team Cook API: Services Layer
===============================

What:  Process-wide state the handlers depend on.

Service Inventory:
    - CacheService:        durable TTL cache in the `cache` table
    - IngredientRegistry:  in-memory ingredient dedupe key → stable ID

Both are created once in the lifespan and passed to handler constructors;
no module in this package keeps a global instance.
"""
