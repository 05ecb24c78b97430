"""Google Places client for nearby attraction search and place photos.

https://developers.google.com/maps/documentation/places/web-service
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from core.errors import PlacesError
from core.models import Coordinate, PlaceResult

BASE_URL = "https://maps.googleapis.com/maps/api/place"
DEFAULT_PLACEHOLDER_URL = "https://example.com/default.jpg"
PHOTO_MAX_WIDTH = 400

_OK_STATUSES = {"OK", "ZERO_RESULTS"}


class GooglePlacesClient:
    """Places search and photo lookup against the Google Places web service.

    `search` raises `PlacesError` so callers can show status text;
    `find_place_photo` never raises and falls back to the placeholder URL.
    """

    def __init__(
        self,
        api_key: str,
        placeholder_url: str = DEFAULT_PLACEHOLDER_URL,
        timeout: float = 10.0,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or ""
        self._placeholder_url = placeholder_url
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        """Check if an API key is configured"""
        return bool(self._api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def _get_json(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.get(
                f"{self._base_url}/{endpoint}", params={**params, "key": self._api_key}
            )
            response.raise_for_status()
            data = response.json()
        if not isinstance(data, dict):
            raise ValueError("response is not a JSON object")
        return data

    async def search(self, query: str, near: Coordinate, radius: int) -> list[PlaceResult]:
        """Search places matching `query` within `radius` meters of `near`."""
        if not self.is_configured:
            raise PlacesError("Places API key not configured")

        params = {
            "query": query,
            "location": f"{near.latitude},{near.longitude}",
            "radius": int(radius),
        }
        try:
            data = await self._get_json("textsearch/json", params)
        except httpx.HTTPError as ex:
            logger.error("Places search request failed: {}", ex)
            raise PlacesError(f"Places search failed: {ex}") from ex
        except ValueError as ex:
            logger.error("Places search returned invalid JSON: {}", ex)
            raise PlacesError(f"Invalid places response: {ex}") from ex

        status = data.get("status", "")
        if status not in _OK_STATUSES:
            message = data.get("error_message") or status or "unknown error"
            logger.error("Places search error status {}: {}", status, message)
            raise PlacesError(f"Places search error: {message}")

        results = self._parse_results(data.get("results") or [])
        logger.info("Places search '{}' returned {} result(s)", query, len(results))
        return results

    def _parse_results(self, rows: list[Any]) -> list[PlaceResult]:
        results: list[PlaceResult] = []
        for row in rows:
            try:
                loc = row["geometry"]["location"]
                results.append(
                    PlaceResult(
                        name=row.get("name") or "Unknown Place",
                        coordinate=Coordinate(float(loc["lat"]), float(loc["lng"])),
                        description=row.get("formatted_address")
                        or row.get("vicinity")
                        or "No description available.",
                    )
                )
            except (KeyError, TypeError, ValueError, AttributeError) as ex:
                logger.warning("Skipping malformed place result: {}", ex)
        return results

    async def find_place_photo(self, name: str) -> str:
        """Return a photo URL for the place called `name`, or the placeholder."""
        if not self.is_configured or not name:
            return self._placeholder_url
        params = {"input": name, "inputtype": "textquery", "fields": "photos"}
        try:
            data = await self._get_json("findplacefromtext/json", params)
            reference = data["candidates"][0]["photos"][0]["photo_reference"]
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as ex:
            logger.debug("Place photo lookup failed for {}: {}", name, ex)
            return self._placeholder_url
        if not isinstance(reference, str) or not reference:
            return self._placeholder_url
        return self.photo_url(reference)

    def photo_url(self, reference: str) -> str:
        """Build the fetchable URL for a place photo reference."""
        url = httpx.URL(
            f"{self._base_url}/photo",
            params={"maxwidth": PHOTO_MAX_WIDTH, "photoreference": reference, "key": self._api_key},
        )
        return str(url)
