"""
Team Cook API: Route Pattern Compiler
=======================================

What:  Turns a declarative pattern such as `/api/1/recipes/:id/information`
       into a matcher that extracts named parameters from a request path.
How:   The pattern is split on '/' once, at compile time. Matching walks the
       path segments against the compiled segments. No regex, no state.
Who:   Handler construction (chain/handler.py) compiles every declared route.

Pattern grammar:
    pattern  := "/" segment ("/" segment)*
    segment  := literal | ":" name

    - A literal matches the identical path segment.
    - A capture matches exactly one non-empty path segment and never spans '/'.
    - Capture names are unique within a pattern.

Examples:
    compile_route("/api/1/recipes/:id/information").match("/api/1/recipes/42/information")
        → {"id": "42"}
    compile_route("/api/1/recipes/random").match("/api/1/recipes/42/information")
        → None
"""

from typing import Dict, Optional, Tuple

from teamcook_api.exceptions import RouteDefinitionError

CAPTURE_MARKER = ":"


class RouteMatcher:
    """
    A compiled route pattern. Immutable once built.

    Attributes:
        pattern:       the source pattern string
        capture_names: capture names in pattern order
    """

    __slots__ = ("pattern", "_segments", "capture_names")

    def __init__(self, pattern: str, segments: Tuple[Tuple[bool, str], ...]):
        self.pattern = pattern
        # (is_capture, literal text or capture name)
        self._segments = segments
        self.capture_names = tuple(text for is_capture, text in segments if is_capture)

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """
        Match a concrete request path.

        Returns:
            A dict of capture name → segment value on a match (empty for
            all-literal patterns), or None when the path does not match.
        """
        parts = path.split("/")
        if len(parts) != len(self._segments):
            return None

        params: Dict[str, str] = {}
        for (is_capture, text), part in zip(self._segments, parts):
            if is_capture:
                if not part:
                    return None
                params[text] = part
            elif part != text:
                return None
        return params

    def __repr__(self) -> str:
        return f"<RouteMatcher {self.pattern!r}>"


def compile_route(pattern: str) -> RouteMatcher:
    """
    Compile `pattern` into a RouteMatcher.

    Raises:
        RouteDefinitionError: the pattern does not start with '/', has an
            empty capture name, or repeats a capture name.
    """
    if not pattern.startswith("/"):
        raise RouteDefinitionError(pattern, "must start with '/'")

    segments = []
    seen = set()
    for part in pattern.split("/"):
        if part.startswith(CAPTURE_MARKER):
            name = part[len(CAPTURE_MARKER):]
            if not name:
                raise RouteDefinitionError(pattern, "capture name must not be empty")
            if name in seen:
                raise RouteDefinitionError(pattern, f"duplicate capture name '{name}'")
            seen.add(name)
            segments.append((True, name))
        else:
            segments.append((False, part))

    return RouteMatcher(pattern, tuple(segments))
