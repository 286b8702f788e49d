"""
Team Cook API: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh per test):
    ├── fake_clock:       controllable time source for TTL tests
    ├── cache_engine:     async SQLite engine on a temp file, schema created
    ├── cache_service:    CacheService on cache_engine + fake_clock
    ├── registry:         IngredientRegistry seeded with REFERENCE_SEED
    ├── upstream:         FakeUpstream standing in for Spoonacular
    ├── http_client:      httpx.AsyncClient routed to `upstream` via MockTransport
    ├── chain:            production handler chain over the fixtures above
    ├── make_request:     builds a Starlette Request for direct handler tests
    ├── app:              FastAPI app with `chain` on app.state
    └── test_client:      HTTPX AsyncClient talking to `app` in-process
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Override settings for testing BEFORE any app imports
os.environ["SPOONACULAR_API_KEY"] = "test-key-not-real"
os.environ["CACHE_DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{tempfile.mkdtemp(prefix='teamcook_test_')}/cache.sqlite"
)
os.environ["INGREDIENT_REFERENCE_PATH"] = str(
    Path(__file__).resolve().parent.parent / "data" / "ingredients-with-possible-units.csv"
)
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from teamcook_api.database import create_engine_from_url, create_schema, create_session_factory
from teamcook_api.handlers import build_handler_chain
from teamcook_api.services.cache_service import CacheService
from teamcook_api.services.ingredient_registry import IngredientRegistry

REFERENCE_SEED = 20081
UPSTREAM_BASE_URL = "https://api.spoonacular.test"
UPSTREAM_API_KEY = "test-key"


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """
    In-process stand-in for the Spoonacular API.

    Usage:
        upstream.respond("/recipes/42/information", {"id": 42})
        upstream.respond("/recipes/random", {"code": 503}, status=503)
        upstream.unreachable = True   # every call raises httpx.ConnectError
    """

    def __init__(self):
        self.routes: Dict[str, Tuple[int, object]] = {}
        self.requests: List[httpx.Request] = []
        self.unreachable = False

    def respond(self, path: str, payload, status: int = 200) -> None:
        self.routes[path] = (status, payload)

    def calls_to(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)

    @property
    def last_request(self) -> Optional[httpx.Request]:
        return self.requests[-1] if self.requests else None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        status, payload = self.routes.get(request.url.path, (404, {"message": "Not found"}))
        return httpx.Response(status, json=payload)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest_asyncio.fixture
async def cache_engine(tmp_path):
    """Async engine on a fresh SQLite file with the cache table created."""
    engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'cache.sqlite'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def cache_service(cache_engine, fake_clock):
    return CacheService(create_session_factory(cache_engine), clock=fake_clock)


@pytest.fixture
def registry():
    return IngredientRegistry(seed=REFERENCE_SEED)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest_asyncio.fixture
async def http_client(upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handle))
    yield client
    await client.aclose()


@pytest.fixture
def chain(cache_service, registry, http_client):
    return build_handler_chain(
        cache=cache_service,
        registry=registry,
        http_client=http_client,
        upstream_base_url=UPSTREAM_BASE_URL,
        api_key=UPSTREAM_API_KEY,
    )


@pytest.fixture
def make_request():
    """
    Returns a factory for Starlette Requests, for calling handlers directly.

    Usage:
        request = make_request("/api/1/recipes/random", query="number=2",
                               headers={"Cache-Control": "no-cache"})
    """

    def _make(path: str, query: str = "", headers: Optional[Dict[str, str]] = None,
              method: str = "GET") -> Request:
        scope = {
            "type": "http",
            "method": method,
            "scheme": "http",
            "server": ("testserver", 80),
            "root_path": "",
            "path": path,
            "raw_path": path.encode(),
            "query_string": query.encode(),
            "headers": [
                (name.lower().encode(), value.encode())
                for name, value in (headers or {}).items()
            ],
        }
        return Request(scope)

    return _make


@pytest.fixture
def app(chain):
    """
    A fresh FastAPI app serving `chain`.

    ASGITransport does not run the lifespan, so the chain from the fixtures
    is placed on app.state directly. Tests may swap it for their own.
    """
    from teamcook_api.main import create_app

    application = create_app()
    application.state.chain = chain
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient wired to `app`.

    raise_app_exceptions=False lets tests observe the 500 the catch-all
    exception handler produces instead of the re-raised exception.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
