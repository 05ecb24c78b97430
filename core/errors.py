"""Exception hierarchy shared by the persistence, media and discovery layers."""

from __future__ import annotations


class TravelerError(Exception):
    """Base exception for journal operations."""


class PersistenceError(TravelerError):
    """Raised when a document or image file cannot be read or written."""


class CorruptDataError(TravelerError):
    """Raised when a persisted document exists but does not match its schema."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Corrupt document {path}: {reason}")
        self.path = path
        self.reason = reason


class InvalidImageError(TravelerError):
    """Raised when picked bytes cannot be identified as an image."""


class LocationError(TravelerError):
    """Raised when the current location cannot be determined."""


class PlacesError(TravelerError):
    """Raised when the places search service fails."""
