"""Core service interfaces and shared data structures.

This module defines the delete planning/result dataclasses used by the
view-models and infrastructure, plus the narrow adapter contracts for the
platform collaborators (image picking, location, places search).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from core.models import Coordinate, PlaceResult


@dataclass
class DeleteResult:
    """Outcome of a file delete operation.

    Attributes:
        success_paths: Paths successfully deleted.
        failed: Tuples of (path, reason) for failures.
    """

    success_paths: list[str]
    failed: list[tuple[str, str]]


@dataclass
class DeletePlan:
    """Pending delete awaiting user confirmation.

    Nothing is removed until the plan is passed back to the owning store's
    `confirm_delete`; dropping the plan cancels the request.

    Attributes:
        kind: Entity kind, one of "trip", "album" or "photo".
        ids: Identifiers chosen for deletion, in collection order.
        title: Short confirmation title.
        message: Confirmation prompt for the user.
        owner_id: Trip id for album deletes; None otherwise.
    """

    kind: str
    ids: list[str]
    title: str
    message: str
    owner_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.ids


class ImageSource(Protocol):
    """Platform image capture/picker capability.

    Both calls are user-cancelable: a cancel yields `[]` or `None`.
    """

    async def pick(self) -> list[bytes]:
        """Return the raw bytes of every image the user picked."""
        ...

    async def capture(self) -> bytes | None:
        """Return the bytes of a newly captured image, or None on cancel."""
        ...


class LocationProvider(Protocol):
    """Delivers the current location once per request."""

    async def request_current_location(self) -> Coordinate:
        """Return the current coordinate or raise `LocationError`."""
        ...


class PlacesSearch(Protocol):
    """Remote places search."""

    async def search(self, query: str, near: Coordinate, radius: int) -> list[PlaceResult]:
        """Return places matching `query` around `near`; raise `PlacesError` on failure."""
        ...


class PhotoLookup(Protocol):
    """Remote lookup of a representative photo for a place name."""

    async def find_place_photo(self, name: str) -> str:
        """Return a photo URL, or the placeholder URL on any failure."""
        ...
