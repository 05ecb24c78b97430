"""Location provider backed by configured coordinates."""

from __future__ import annotations

from loguru import logger

from core.errors import LocationError
from core.models import Coordinate


class FixedLocationProvider:
    """Reports a configured coordinate as the current location.

    Desktop hosts have no positioning hardware to query, so the coordinate
    comes from settings (`location.latitude` / `location.longitude`).
    """

    def __init__(self, latitude: float | None, longitude: float | None) -> None:
        self._coordinate: Coordinate | None = None
        try:
            if latitude is not None and longitude is not None:
                lat, lon = float(latitude), float(longitude)
                if -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0:
                    self._coordinate = Coordinate(lat, lon)
                else:
                    logger.warning("Configured location out of range: {}, {}", lat, lon)
        except (TypeError, ValueError):
            logger.warning("Invalid configured location: {}, {}", latitude, longitude)

    @classmethod
    def from_settings(cls, settings) -> "FixedLocationProvider":
        return cls(settings.get("location.latitude"), settings.get("location.longitude"))

    async def request_current_location(self) -> Coordinate:
        if self._coordinate is None:
            raise LocationError("Location is not available")
        return self._coordinate
