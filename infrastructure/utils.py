"""Utilities for identifiers and date formatting.

This module centralizes id generation and persisted date parsing/formatting so
the rest of the app can depend on a single behavior. Parsing is best-effort
and will not raise; callers should expect `None` when a value is invalid.
"""

from __future__ import annotations

from datetime import date, datetime
import uuid

from loguru import logger

DATE_FMT = "%Y-%m-%d"
STAMP_FMT = "%Y%m%d_%H%M%S"


def new_identifier() -> str:
    """Return a fresh, globally unique entity identifier."""
    return str(uuid.uuid4())


def photo_file_name(ext: str) -> str:
    """Return a fresh file name for photo bytes, e.g. `<uuid>.jpg`."""
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return f"{new_identifier()}{ext.lower()}"


def parse_date(value: str | None) -> date | None:
    """Parse an ISO `YYYY-MM-DD` date; return None on failure."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FMT).date()
    except (ValueError, TypeError, AttributeError):
        logger.warning("Invalid date: {}", value)
        return None


def format_date(d: date | None) -> str:
    """Format a date for persistence; empty string when None."""
    try:
        return d.strftime(DATE_FMT) if d else ""
    except (ValueError, TypeError, AttributeError):
        return ""


def timestamp() -> str:
    """Local timestamp suitable for file name suffixes."""
    return datetime.now().strftime(STAMP_FMT)
