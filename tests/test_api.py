"""
Team Cook API: End-to-End Tests
=================================

What:  Requests through the full FastAPI app: middleware, exception
       handlers, the catch-all route and the production handler chain.
How:   `test_client` talks to the app in-process; the upstream is the
       FakeUpstream MockTransport, the cache a temporary SQLite file.

What we test:
    ✅ GET /api/status answers OK without touching the upstream
    ✅ Recipe information: MISS then byte-identical HIT, one upstream call
    ✅ The same unknown ingredient gets the same ID in different recipes
    ✅ Upstream error statuses pass through and are not cached
    ✅ by-ingredients is proxied but never cached
    ✅ Unclaimed paths → 404, unreachable upstream → 502, crashes → 500
    ✅ X-Request-ID is generated or echoed
    ✅ Access log carries the cache outcome and skips /api/status
"""

import json
import logging

import pytest

from teamcook_api.chain import Handler, HandlerChain
from teamcook_api.middleware.logging import level_for_status

INFO_PATH = "/recipes/42/information"


def upstream_recipe(recipe_id, *ingredients):
    return {
        "id": recipe_id,
        "title": f"Recipe {recipe_id}",
        "extendedIngredients": [
            {"id": ingredient_id, "name": name, "originalName": original}
            for ingredient_id, name, original in ingredients
        ],
    }


class TestStatus:
    @pytest.mark.asyncio
    async def test_status_ok(self, test_client, upstream):
        response = await test_client.get("/api/status")
        assert response.status_code == 200
        assert response.text == "OK"
        assert upstream.requests == []


class TestRecipeInformation:
    @pytest.mark.asyncio
    async def test_miss_then_identical_hit(self, test_client, upstream, registry):
        upstream.respond(INFO_PATH, upstream_recipe(42, (-1, "onion", "1 onion")))

        first = await test_client.get("/api/1/recipes/42/information")
        second = await test_client.get("/api/1/recipes/42/information")

        assert first.status_code == second.status_code == 200
        assert first.headers["X-Cache"] == "MISS"
        assert second.headers["X-Cache"] == "HIT"
        assert second.content == first.content
        assert upstream.calls_to(INFO_PATH) == 1

        ingredient_id = first.json()["extendedIngredients"][0]["id"]
        assert ingredient_id > registry.seed

    @pytest.mark.asyncio
    async def test_api_key_sent_upstream(self, test_client, upstream):
        upstream.respond(INFO_PATH, upstream_recipe(42))

        await test_client.get("/api/1/recipes/42/information?includeNutrition=false")

        params = list(upstream.last_request.url.params.multi_items())
        assert params == [("includeNutrition", "false"), ("apiKey", "test-key")]

    @pytest.mark.asyncio
    async def test_same_ingredient_same_id_across_recipes(self, test_client, upstream):
        upstream.respond("/recipes/1/information", upstream_recipe(1, (-1, "Sumac", "1 tsp sumac")))
        upstream.respond("/recipes/2/information", upstream_recipe(2, (-1, "sumac", "1 TSP SUMAC")))

        first = (await test_client.get("/api/1/recipes/1/information")).json()
        second = (await test_client.get("/api/1/recipes/2/information")).json()

        assert (
            first["extendedIngredients"][0]["id"]
            == second["extendedIngredients"][0]["id"]
        )

    @pytest.mark.asyncio
    async def test_upstream_error_passes_through_uncached(self, test_client, upstream):
        upstream.respond(INFO_PATH, {"status": "failure", "code": 503}, status=503)

        first = await test_client.get("/api/1/recipes/42/information")
        second = await test_client.get("/api/1/recipes/42/information")

        assert first.status_code == second.status_code == 503
        assert first.json() == {"status": "failure", "code": 503}
        assert "X-Cache" not in second.headers
        assert upstream.calls_to(INFO_PATH) == 2

    @pytest.mark.asyncio
    async def test_no_cache_header_refetches(self, test_client, upstream):
        upstream.respond(INFO_PATH, upstream_recipe(42))

        await test_client.get("/api/1/recipes/42/information")
        bypass = await test_client.get(
            "/api/1/recipes/42/information", headers={"Cache-Control": "no-cache"}
        )

        assert bypass.headers["X-Cache"] == "MISS"
        assert upstream.calls_to(INFO_PATH) == 2


class TestRandomRecipes:
    @pytest.mark.asyncio
    async def test_list_prewarms_information_route(self, test_client, upstream):
        upstream.respond("/recipes/random", {"recipes": [upstream_recipe(7, (-1, "sumac", "sumac"))]})

        listed = await test_client.get("/api/1/recipes/random?number=1")
        opened = await test_client.get("/api/1/recipes/7/information")

        assert listed.headers["X-Cache"] == "MISS"
        assert opened.headers["X-Cache"] == "HIT"
        assert opened.json() == listed.json()["recipes"][0]
        assert upstream.calls_to("/recipes/7/information") == 0


class TestByIngredients:
    @pytest.mark.asyncio
    async def test_proxied_and_never_cached(self, test_client, upstream):
        upstream.respond("/recipes/findByIngredients", [{"id": 1, "title": "Apple Pie"}])

        for _ in range(2):
            response = await test_client.get("/api/1/recipes/by-ingredients?ingredients=apples")
            assert response.status_code == 200
            assert response.json() == [{"id": 1, "title": "Apple Pie"}]
            assert "X-Cache" not in response.headers

        assert upstream.calls_to("/recipes/findByIngredients") == 2


class TestErrors:
    @pytest.mark.asyncio
    async def test_unclaimed_path_is_not_found(self, test_client, upstream):
        response = await test_client.get("/api/1/unknown")
        assert response.status_code == 404
        assert response.text == "Not Found"
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_unreachable_upstream_is_bad_gateway(self, test_client, upstream):
        upstream.unreachable = True

        response = await test_client.get("/api/1/recipes/42/information")

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "upstream_unavailable"
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_internal_error(self, app, test_client):
        async def explode(request, call_next):
            raise RuntimeError("database on fire")

        app.state.chain = HandlerChain([Handler(name="explode", catch_all=explode)])

        response = await test_client.get("/api/1/recipes/random")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert "database on fire" not in json.dumps(body)


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/api/status")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_echoed_when_sent(self, test_client):
        response = await test_client.get("/api/status", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"


class TestAccessLog:
    def test_level_follows_status(self):
        assert level_for_status(200) == logging.INFO
        assert level_for_status(404) == logging.WARNING
        assert level_for_status(502) == logging.ERROR

    @pytest.mark.asyncio
    async def test_cache_outcome_is_logged(self, test_client, upstream, caplog):
        upstream.respond(INFO_PATH, upstream_recipe(42))
        caplog.set_level(logging.INFO, logger="teamcook_api.access")

        await test_client.get("/api/1/recipes/42/information")

        records = [r for r in caplog.records if r.name == "teamcook_api.access"]
        assert len(records) == 1
        assert records[0].cache == "MISS"
        assert records[0].status == 200

    @pytest.mark.asyncio
    async def test_status_endpoint_is_silent(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="teamcook_api.access")

        await test_client.get("/api/status")

        assert not [r for r in caplog.records if r.name == "teamcook_api.access"]
