"""
Team Cook API: Handler Interface
==================================

What:  The unit the handler chain is built from.
How:   A handler has a name, an optional table of route patterns → route
       functions, and an optional catch-all. Route patterns are compiled once
       when the handler is constructed.

Two ways to define one:

    class CacheHandler(Handler):
        name = "cache"

        def declare_routes(self):
            return {"/api/1/recipes/random": self.handle_recipes}

        async def handle_recipes(self, request, params, call_next):
            response = await call_next()
            ...

    Handler(name="passthrough", catch_all=lambda request, call_next: call_next())

A handler with neither routes nor catch-all is a pass-through: the chain
just calls the next handler.
"""

from typing import Awaitable, Callable, Dict, Mapping, Optional, Tuple

from starlette.requests import Request
from starlette.responses import Response

from teamcook_api.chain.router import RouteMatcher, compile_route

# Runs the remainder of the chain and returns its response
CallNext = Callable[[], Awaitable[Response]]

RouteFunction = Callable[[Request, Dict[str, str], CallNext], Awaitable[Response]]
CatchAllFunction = Callable[[Request, CallNext], Awaitable[Response]]


class Handler:
    """
    Base class for chain handlers.

    Subclasses override `declare_routes()` and/or define a `catch_all`
    coroutine method. Handlers keep no per-request state; services they
    need are passed to their constructor.
    """

    name: str = "handler"

    # Called when no declared route matches; None means "pass through"
    catch_all: Optional[CatchAllFunction] = None

    def __init__(
        self,
        name: Optional[str] = None,
        routes: Optional[Mapping[str, RouteFunction]] = None,
        catch_all: Optional[CatchAllFunction] = None,
    ):
        if name is not None:
            self.name = name
        if catch_all is not None:
            self.catch_all = catch_all

        declared = routes if routes is not None else self.declare_routes()
        self._routes: Tuple[Tuple[RouteMatcher, RouteFunction], ...] = tuple(
            (compile_route(pattern), route_fn) for pattern, route_fn in declared.items()
        )

    def declare_routes(self) -> Mapping[str, RouteFunction]:
        """Route pattern → route function. Empty by default."""
        return {}

    @property
    def route_patterns(self) -> Tuple[str, ...]:
        return tuple(matcher.pattern for matcher, _ in self._routes)

    def find_route(self, path: str) -> Optional[Tuple[RouteFunction, Dict[str, str]]]:
        """First declared route matching `path`, with its parameters."""
        for matcher, route_fn in self._routes:
            params = matcher.match(path)
            if params is not None:
                return route_fn, params
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} routes={list(self.route_patterns)}>"
