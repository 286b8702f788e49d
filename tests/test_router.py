"""
Team Cook API: Route Pattern Tests
====================================

What:  Tests for compile_route() and RouteMatcher.match().
How:   Pure functions, no fixtures needed.

What we test:
    ✅ Literal patterns match only the identical path
    ✅ Captures bind exactly one non-empty segment
    ✅ Segment count must agree (no prefix matching, no spanning '/')
    ✅ Invalid patterns raise RouteDefinitionError at compile time
"""

import pytest

from teamcook_api.chain.router import compile_route
from teamcook_api.exceptions import RouteDefinitionError


class TestLiteralPatterns:
    def test_exact_path_matches_with_no_params(self):
        matcher = compile_route("/api/1/recipes/random")
        assert matcher.match("/api/1/recipes/random") == {}

    def test_different_literal_does_not_match(self):
        matcher = compile_route("/api/1/recipes/random")
        assert matcher.match("/api/1/recipes/randomly") is None

    def test_prefix_is_not_a_match(self):
        matcher = compile_route("/api/1/recipes")
        assert matcher.match("/api/1/recipes/random") is None

    def test_trailing_slash_is_a_different_path(self):
        matcher = compile_route("/api/1/recipes/random")
        assert matcher.match("/api/1/recipes/random/") is None

    def test_root_pattern(self):
        matcher = compile_route("/")
        assert matcher.match("/") == {}
        assert matcher.match("/api") is None


class TestCaptures:
    def test_capture_binds_segment(self):
        matcher = compile_route("/api/1/recipes/:id/information")
        assert matcher.match("/api/1/recipes/42/information") == {"id": "42"}

    def test_capture_value_is_raw_text(self):
        """Captures are strings; no numeric conversion happens here."""
        matcher = compile_route("/api/1/recipes/:id/information")
        assert matcher.match("/api/1/recipes/abc/information") == {"id": "abc"}

    def test_capture_does_not_span_slash(self):
        matcher = compile_route("/api/1/recipes/:id/information")
        assert matcher.match("/api/1/recipes/4/2/information") is None

    def test_capture_requires_non_empty_segment(self):
        matcher = compile_route("/api/1/recipes/:id/information")
        assert matcher.match("/api/1/recipes//information") is None

    def test_multiple_captures(self):
        matcher = compile_route("/users/:user/lists/:list")
        assert matcher.capture_names == ("user", "list")
        assert matcher.match("/users/7/lists/dinner") == {"user": "7", "list": "dinner"}

    def test_literal_after_capture_must_match(self):
        matcher = compile_route("/api/1/recipes/:id/information")
        assert matcher.match("/api/1/recipes/42/nutrition") is None

    @pytest.mark.parametrize("value", ["1", "716429", "x-y_z", "%20"])
    def test_substituted_pattern_round_trips(self, value):
        """Substituting a value for the capture yields a path that matches back to it."""
        matcher = compile_route("/api/1/recipes/:id/information")
        assert matcher.match(f"/api/1/recipes/{value}/information") == {"id": value}


class TestInvalidPatterns:
    def test_pattern_without_leading_slash(self):
        with pytest.raises(RouteDefinitionError) as exc_info:
            compile_route("api/1/recipes")
        assert exc_info.value.pattern == "api/1/recipes"

    def test_empty_capture_name(self):
        with pytest.raises(RouteDefinitionError):
            compile_route("/api/1/recipes/:/information")

    def test_duplicate_capture_name(self):
        with pytest.raises(RouteDefinitionError) as exc_info:
            compile_route("/a/:id/b/:id")
        assert "duplicate" in exc_info.value.message
