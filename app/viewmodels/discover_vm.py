"""ViewModel for discovering nearby tourist attractions."""

from __future__ import annotations

import asyncio

from loguru import logger

from core.errors import LocationError, PlacesError
from core.models import Coordinate, VacationSpot
from core.services.interfaces import LocationProvider, PhotoLookup, PlacesSearch

DEFAULT_QUERY = "Tourist attractions"
DEFAULT_RADIUS_M = 5000


class DiscoverVM:
    """Locates the user, searches nearby attractions and looks up their photos.

    A refresh started while another is in flight supersedes it: results of
    the older refresh are discarded when they arrive.
    """

    def __init__(
        self,
        location_provider: LocationProvider,
        places: PlacesSearch,
        photo_lookup: PhotoLookup,
        query: str = DEFAULT_QUERY,
        radius: int = DEFAULT_RADIUS_M,
    ) -> None:
        self._location = location_provider
        self._places = places
        self._photos = photo_lookup
        self._query = query
        self._radius = radius
        self._generation = 0
        self.spots: list[VacationSpot] = []
        self.location: Coordinate | None = None
        self.is_loading = False
        self.error_message: str | None = None

    async def refresh(self) -> list[VacationSpot]:
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self.error_message = None

        try:
            location = await self._location.request_current_location()
        except LocationError as ex:
            return self._fail(generation, f"Unable to determine your location: {ex}")

        try:
            places = await self._places.search(self._query, location, self._radius)
        except PlacesError as ex:
            return self._fail(generation, f"Error searching for nearby places: {ex}")

        urls = await asyncio.gather(*(self._photos.find_place_photo(p.name) for p in places))

        if generation != self._generation:
            logger.debug("Discarding superseded discover results ({})", generation)
            return self.spots
        self.location = location
        self.spots = [
            VacationSpot(
                name=place.name,
                image_url=url,
                coordinate=place.coordinate,
                description=place.description,
            )
            for place, url in zip(places, urls)
        ]
        self.is_loading = False
        logger.info("Discovered {} spot(s) near {}", len(self.spots), location)
        return self.spots

    def _fail(self, generation: int, message: str) -> list[VacationSpot]:
        if generation == self._generation:
            logger.warning(message)
            self.error_message = message
            self.is_loading = False
        return self.spots
