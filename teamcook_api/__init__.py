"""
Team Cook API: Application Package Initializer
================================================

What: Marks the `teamcook_api` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The service is a caching proxy in front of the Spoonacular recipe API:

    ┌─────────────────────────────────────┐
    │      Routes (FastAPI shell)         │  ← /api/status + catch-all into the chain
    ├─────────────────────────────────────┤
    │      Handler Chain (chain/)         │  ← route matching, ordered handlers, call_next
    ├─────────────────────────────────────┤
    │      Handlers (handlers/)           │  ← cache, ingredient ids, love, upstream proxy
    ├─────────────────────────────────────┤
    │      Services (services/)           │  ← TTL cache store, ingredient id registry
    ├─────────────────────────────────────┤
    │      Database (Persistence)         │  ← async SQLAlchemy engine for the cache table
    └─────────────────────────────────────┘

    Handlers never reach for globals: the cache, the registry and the HTTP
    client are created in the lifespan and handed to each handler.
"""

__version__ = "1.0.0"
