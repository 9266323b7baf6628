"""Nominatim resolver (respx-mocked HTTP, AsyncMock Redis) and debouncing."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest
import respx
from httpx import Response
from redis.exceptions import ConnectionError as RedisConnectionError

from src.domain.entities import GeoPoint, Location
from src.infrastructure.geocoding import DebouncedSearch, NominatimResolver

BASE_URL = "https://nominatim.test"

SEARCH_RESULTS = [
    {
        "place_id": 1,
        "lat": "-1.2864",
        "lon": "36.8172",
        "display_name": "Kenyatta Avenue, Nairobi, Kenya",
    },
    {
        "place_id": 2,
        "lat": "-1.3192",
        "lon": "36.9278",
        "display_name": "Jomo Kenyatta International Airport, Kenya",
    },
]


def _resolver(client: httpx.AsyncClient, cache=None) -> NominatimResolver:
    return NominatimResolver(client, base_url=BASE_URL, cache=cache, cache_ttl=60)


class TestSearch:
    @pytest.mark.asyncio
    async def test_parses_results(self):
        async with respx.mock:
            route = respx.route(method="GET", host="nominatim.test", path="/search").mock(
                return_value=Response(200, json=SEARCH_RESULTS)
            )
            async with httpx.AsyncClient() as client:
                results = await _resolver(client).search("Kenyatta")

        assert route.called
        params = route.calls.last.request.url.params
        assert params["q"] == "Kenyatta"
        assert params["countrycodes"] == "ke"
        assert params["limit"] == "5"
        assert route.calls.last.request.headers["User-Agent"] == "taxi-booking-app"
        assert results == [
            Location.from_coordinates(-1.2864, 36.8172, "Kenyatta Avenue, Nairobi, Kenya"),
            Location.from_coordinates(-1.3192, 36.9278, "Jomo Kenyatta International Airport, Kenya"),
        ]

    @pytest.mark.asyncio
    async def test_country_filter_override(self):
        async with respx.mock:
            route = respx.route(method="GET", host="nominatim.test", path="/search").mock(
                return_value=Response(200, json=[])
            )
            async with httpx.AsyncClient() as client:
                await _resolver(client).search("Kampala Road", "ug")

        assert route.calls.last.request.url.params["countrycodes"] == "ug"

    @pytest.mark.asyncio
    async def test_short_query_skips_network(self):
        client = AsyncMock()
        assert await _resolver(client).search("Na") == []
        client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_server_error_yields_empty(self):
        async with respx.mock:
            respx.route(method="GET", host="nominatim.test", path="/search").mock(
                return_value=Response(503)
            )
            async with httpx.AsyncClient() as client:
                assert await _resolver(client).search("Nairobi") == []

    @pytest.mark.asyncio
    async def test_network_error_yields_empty(self):
        async with respx.mock:
            respx.route(method="GET", host="nominatim.test", path="/search").mock(
                side_effect=httpx.ConnectError("unreachable")
            )
            async with httpx.AsyncClient() as client:
                assert await _resolver(client).search("Nairobi") == []

    @pytest.mark.asyncio
    async def test_malformed_items_are_skipped(self):
        body = SEARCH_RESULTS[:1] + [{"lat": "abc", "lon": "1", "display_name": "x"}, {"place_id": 9}]
        async with respx.mock:
            respx.route(method="GET", host="nominatim.test", path="/search").mock(
                return_value=Response(200, json=body)
            )
            async with httpx.AsyncClient() as client:
                results = await _resolver(client).search("Kenyatta")

        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_cache_hit_skips_network(self):
        cache = AsyncMock()
        cache.get.return_value = json.dumps(
            [{"lat": -1.2864, "lng": 36.8172, "address": "Cached CBD"}]
        )
        client = AsyncMock()

        results = await _resolver(client, cache).search("Nairobi CBD")

        assert results[0].address == "Cached CBD"
        client.get.assert_not_called()
        cache.get.assert_awaited_once_with("geocode:search:ke:nairobi cbd")

    @pytest.mark.asyncio
    async def test_cache_miss_stores_result(self):
        cache = AsyncMock()
        cache.get.return_value = None
        async with respx.mock:
            respx.route(method="GET", host="nominatim.test", path="/search").mock(
                return_value=Response(200, json=SEARCH_RESULTS)
            )
            async with httpx.AsyncClient() as client:
                await _resolver(client, cache).search("Kenyatta")

        key, payload = cache.set.await_args.args
        assert key == "geocode:search:ke:kenyatta"
        assert json.loads(payload)[0]["address"] == "Kenyatta Avenue, Nairobi, Kenya"
        assert cache.set.await_args.kwargs == {"ex": 60}

    @pytest.mark.asyncio
    async def test_unreachable_cache_is_bypassed(self):
        cache = AsyncMock()
        cache.get.side_effect = RedisConnectionError("no redis")
        cache.set.side_effect = RedisConnectionError("no redis")
        async with respx.mock:
            respx.route(method="GET", host="nominatim.test", path="/search").mock(
                return_value=Response(200, json=SEARCH_RESULTS)
            )
            async with httpx.AsyncClient() as client:
                results = await _resolver(client, cache).search("Kenyatta")

        assert len(results) == 2


class TestReverseGeocode:
    @pytest.mark.asyncio
    async def test_returns_display_name(self):
        async with respx.mock:
            route = respx.route(method="GET", host="nominatim.test", path="/reverse").mock(
                return_value=Response(200, json={"display_name": "Upper Hill, Nairobi"})
            )
            async with httpx.AsyncClient() as client:
                label = await _resolver(client).reverse_geocode(GeoPoint(-1.3, 36.8))

        assert label == "Upper Hill, Nairobi"
        params = route.calls.last.request.url.params
        assert params["lat"] == "-1.3"
        assert params["lon"] == "36.8"

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_coordinates(self):
        async with respx.mock:
            respx.route(method="GET", host="nominatim.test", path="/reverse").mock(
                side_effect=httpx.ReadTimeout("slow")
            )
            async with httpx.AsyncClient() as client:
                label = await _resolver(client).reverse_geocode(GeoPoint(-1.28641, 36.81723))

        assert label == "-1.2864, 36.8172"

    @pytest.mark.asyncio
    async def test_missing_display_name_falls_back(self):
        async with respx.mock:
            respx.route(method="GET", host="nominatim.test", path="/reverse").mock(
                return_value=Response(200, json={"error": "Unable to geocode"})
            )
            async with httpx.AsyncClient() as client:
                label = await _resolver(client).reverse_geocode(GeoPoint(0.5, 35.25))

        assert label == "0.5000, 35.2500"


class _RecordingResolver:
    def __init__(self):
        self.queries: list[str] = []

    async def search(self, text, country_codes=None):
        self.queries.append(text)
        return [Location.from_coordinates(0.0, 0.0, text)]

    async def reverse_geocode(self, point):
        return "unused"


class TestDebouncedSearch:
    @pytest.mark.asyncio
    async def test_only_last_query_reaches_resolver(self):
        resolver = _RecordingResolver()
        debounced = DebouncedSearch(resolver, delay_seconds=0.05)

        first = asyncio.create_task(debounced.submit("Nai"))
        await asyncio.sleep(0)
        second = asyncio.create_task(debounced.submit("Nairo"))
        await asyncio.sleep(0)
        result = await debounced.submit("Nairobi")

        assert [loc.address for loc in result] == ["Nairobi"]
        assert resolver.queries == ["Nairobi"]
        for superseded in (first, second):
            with pytest.raises(asyncio.CancelledError):
                await superseded

    @pytest.mark.asyncio
    async def test_spaced_out_queries_all_run(self):
        resolver = _RecordingResolver()
        debounced = DebouncedSearch(resolver, delay_seconds=0.01)

        await debounced.submit("Westlands")
        await debounced.submit("Kilimani")

        assert resolver.queries == ["Westlands", "Kilimani"]

    @pytest.mark.asyncio
    async def test_cancel_aborts_pending_search(self):
        resolver = _RecordingResolver()
        debounced = DebouncedSearch(resolver, delay_seconds=0.05)

        pending = asyncio.create_task(debounced.submit("Karen"))
        await asyncio.sleep(0)
        debounced.cancel()

        with pytest.raises(asyncio.CancelledError):
            await pending
        assert resolver.queries == []
