"""
Location search and reverse geocoding against Nominatim.

Degradation
-----------
Geocoding is a convenience, never a reason to fail a request: a network
error, a non-2xx answer or an unparsable body is logged and turned into
an empty result list (search) or a ``"lat, lng"`` label (reverse).

Caching
-------
Answers are cached in Redis for ``cache_ttl`` seconds, as the public
Nominatim usage policy asks.  A cache that cannot be reached is skipped.

Debouncing
----------
``DebouncedSearch`` collapses bursts of keystrokes into one lookup: each
``submit`` cancels the one still waiting, so only the last query in a
300 ms window reaches the network.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional, Protocol

import httpx
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.domain.entities import GeoPoint, Location
from src.domain.errors import InvalidCoordinate, ValidationError

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3


def fallback_label(point: GeoPoint) -> str:
    return f"{point.latitude:.4f}, {point.longitude:.4f}"


class LocationResolver(Protocol):
    async def search(
        self, text: str, country_codes: Optional[str] = None
    ) -> list[Location]: ...

    async def reverse_geocode(self, point: GeoPoint) -> str: ...


class NominatimResolver:
    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "taxi-booking-app",
        country_codes: str = "ke",
        limit: int = 5,
        cache: aioredis.Redis | None = None,
        cache_ttl: int = 86_400,
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.country_codes = country_codes
        self.limit = limit
        self.cache = cache
        self.cache_ttl = cache_ttl

    # ── Public API ────────────────────────────────────────────────────

    async def search(
        self, text: str, country_codes: Optional[str] = None
    ) -> list[Location]:
        text = text.strip()
        if len(text) < MIN_QUERY_LENGTH:
            return []
        countries = country_codes or self.country_codes
        key = f"geocode:search:{countries}:{text.lower()}"

        cached = await self._cache_get(key)
        if cached is not None:
            return [Location.from_dict(item) for item in cached]

        data = await self._get(
            "/search",
            {
                "format": "json",
                "q": text,
                "addressdetails": 1,
                "limit": self.limit,
                "countrycodes": countries,
            },
        )
        if not isinstance(data, list):
            return []

        results: list[Location] = []
        for item in data:
            try:
                results.append(
                    Location.from_coordinates(
                        float(item["lat"]), float(item["lon"]), item["display_name"]
                    )
                )
            except (KeyError, TypeError, ValueError, InvalidCoordinate, ValidationError):
                logger.debug("Skipping malformed search result: %r", item)

        await self._cache_set(key, [loc.to_dict() for loc in results])
        return results

    async def reverse_geocode(self, point: GeoPoint) -> str:
        key = f"geocode:reverse:{point.latitude:.6f}:{point.longitude:.6f}"
        cached = await self._cache_get(key)
        if cached is not None:
            return cached

        data = await self._get(
            "/reverse",
            {
                "format": "json",
                "lat": point.latitude,
                "lon": point.longitude,
                "zoom": 18,
                "addressdetails": 1,
            },
        )
        label = data.get("display_name") if isinstance(data, dict) else None
        if not label:
            return fallback_label(point)

        await self._cache_set(key, label)
        return label

    # ── Internals ─────────────────────────────────────────────────────

    async def _get(self, path: str, params: dict) -> object:
        try:
            response = await self.client.get(
                f"{self.base_url}{path}",
                params=params,
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Geocoding request %s failed: %s", path, exc)
            return None

    async def _cache_get(self, key: str):
        if self.cache is None:
            return None
        try:
            raw = await self.cache.get(key)
        except RedisError as exc:
            logger.warning("Geocode cache read failed: %s", exc)
            return None
        return json.loads(raw) if raw else None

    async def _cache_set(self, key: str, value) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.set(key, json.dumps(value), ex=self.cache_ttl)
        except RedisError as exc:
            logger.warning("Geocode cache write failed: %s", exc)


class DebouncedSearch:
    """Run ``resolver.search`` only for the last query of a burst."""

    def __init__(self, resolver: LocationResolver, delay_seconds: float = 0.3):
        self.resolver = resolver
        self.delay = delay_seconds
        self._pending: asyncio.Task | None = None

    async def submit(
        self, text: str, country_codes: Optional[str] = None
    ) -> list[Location]:
        """Superseded calls raise ``asyncio.CancelledError``."""
        self.cancel()
        task = asyncio.ensure_future(self._run(text, country_codes))
        self._pending = task
        try:
            return await task
        finally:
            if self._pending is task:
                self._pending = None

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, text: str, country_codes: Optional[str]) -> list[Location]:
        await asyncio.sleep(self.delay)
        return await self.resolver.search(text, country_codes)
