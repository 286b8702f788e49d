# Chain package init
"""
Team Cook API: Handler Chain Package
======================================

What:  The request pipeline primitives: route patterns, handlers, the executor.

    router.py    compile_route() / RouteMatcher
    handler.py   Handler base class and continuation types
    executor.py  HandlerChain.execute()

Concrete handlers live in `teamcook_api.handlers`.
"""

from teamcook_api.chain.executor import HandlerChain
from teamcook_api.chain.handler import CallNext, Handler
from teamcook_api.chain.router import RouteMatcher, compile_route

__all__ = ["CallNext", "Handler", "HandlerChain", "RouteMatcher", "compile_route"]
