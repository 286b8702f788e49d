"""
Team Cook API: Handler Chain Executor
=======================================

What:  Runs a request through an ordered, immutable list of handlers.
How:   Step `i` gives handler `i` a `call_next` continuation that runs step
       `i + 1`. A handler may call it, inspect and rewrite what comes back,
       or never call it at all.
Who:   The catch-all proxy route (routes/proxy.py) calls `execute()` once
       per request.

Step algorithm (index = i):
    1. i past the last handler       → 404 Not Found
    2. a declared route matches path → route_fn(request, params, call_next)
    3. handler has a catch-all       → catch_all(request, call_next)
    4. otherwise                     → call_next()

Guarantees:
    - Handlers run in construction order.
    - Each handler is entered at most once per request; `call_next` raises
      if a handler tries to run the rest of the chain twice.
    - A handler that does not call `call_next` ends the walk
      (the upstream proxy handler relies on this).

Failure semantics:
    Exceptions are not caught here. They abort the rest of the walk and
    reach the application's exception handlers, which answer with a 500.
"""

from typing import Sequence, Tuple

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from teamcook_api.chain.handler import Handler


def not_found_response() -> Response:
    return PlainTextResponse("Not Found", status_code=404)


class HandlerChain:
    """An ordered, immutable sequence of handlers."""

    def __init__(self, handlers: Sequence[Handler]):
        self._handlers: Tuple[Handler, ...] = tuple(handlers)

    @property
    def handlers(self) -> Tuple[Handler, ...]:
        return self._handlers

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(handler.name for handler in self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    async def execute(self, request: Request, index: int = 0) -> Response:
        """Run the chain from handler `index` onward."""
        if index >= len(self._handlers):
            return not_found_response()

        handler = self._handlers[index]
        called = False

        async def call_next() -> Response:
            nonlocal called
            if called:
                raise RuntimeError(
                    f"Handler '{handler.name}' called call_next() more than once"
                )
            called = True
            return await self.execute(request, index + 1)

        matched = handler.find_route(request.url.path)
        if matched is not None:
            route_fn, params = matched
            return await route_fn(request, params, call_next)

        if handler.catch_all is not None:
            return await handler.catch_all(request, call_next)

        return await call_next()

    def __repr__(self) -> str:
        return f"<HandlerChain {' → '.join(self.names)}>"
