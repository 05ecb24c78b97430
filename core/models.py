"""Core domain models for trips, albums, photos and discovered places."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

STARTER_ALBUM_NAMES = [
    "Airport",
    "Outfit",
    "Hotel",
    "Food and Beverages",
    "Natural Sights",
    "Special Landmarks and Attractions",
    "Events",
    "Shopping Centers",
]


@dataclass
class ImageItem:
    """Metadata record pointing to one stored photo file."""

    id: str
    image_path: str


@dataclass
class Album:
    """A named, ordered collection of photos scoped to a trip.

    The photo sequence is persisted separately, keyed by `id`; `photos` only
    holds what has been loaded into memory.
    """

    id: str
    name: str
    photos: list[ImageItem] = field(default_factory=list)


@dataclass
class Trip:
    """A user-defined travel period with metadata and its albums."""

    id: str
    name: str
    description: str
    begin_date: date
    end_date: date
    location: str
    albums: list[Album] = field(default_factory=list)


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass
class PlaceResult:
    """A single result of a nearby places search."""

    name: str
    coordinate: Coordinate
    description: str


@dataclass
class VacationSpot:
    """A place result decorated with the photo URL found for it."""

    name: str
    image_url: str
    coordinate: Coordinate
    description: str
