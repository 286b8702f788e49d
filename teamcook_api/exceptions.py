"""
Team Cook API: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the failure modes of the proxy.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) turn the ones that
       can happen during a request into structured JSON responses.
Who:   Raised by settings validation, handler construction and the upstream
       proxy handler.

Exception Hierarchy:
    TeamCookError (base)
    ├── ConfigurationError        → fatal at startup (server refuses to serve)
    ├── RouteDefinitionError      → raised while building handlers
    └── UpstreamUnavailableError  → 502 Bad Gateway

Not everything is an exception here. An upstream 4xx/5xx is a normal
response that flows back through the handler chain untouched, and a path no
handler claims becomes the chain's own 404.
"""

from typing import Any, Dict, Optional


class TeamCookError(Exception):
    """
    Base exception for all Team Cook API errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(TeamCookError):
    """
    Raised when the process is not configured well enough to serve traffic.

    When:    SPOONACULAR_API_KEY missing, reference dataset unreadable.
    Effect:  Raised from the lifespan, so uvicorn aborts startup instead of
             running a server that fails every request.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RouteDefinitionError(TeamCookError):
    """
    Raised when a route pattern cannot be compiled.

    When:    Duplicate or empty capture names, pattern not starting with '/'.
             Always at handler construction, never while matching a request.
    """

    def __init__(
        self,
        pattern: str,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["pattern"] = pattern
        super().__init__(message=f"Invalid route pattern '{pattern}': {reason}", context=ctx)
        self.pattern = pattern


class UpstreamUnavailableError(TeamCookError):
    """
    Raised when the upstream recipe API cannot be reached at all.

    What:    Connection refused, DNS failure, timeout, broken response stream.
    HTTP:    502 Bad Gateway

    Upstream responses with an error status are NOT this exception; they are
    passed through with their original status code.
    """

    def __init__(
        self,
        message: str = "The recipe service could not be reached. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
