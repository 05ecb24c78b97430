"""JSON persistence for album photo collections and the trip journal.

Each album's ordered photo metadata lives in its own document named
`<album_id>_images.json`; image bytes live elsewhere (see `image_store`).
Trips and their album lists live in `trips.json`. Every write goes to a temp
file in the same directory and is swapped in with `os.replace`, so a failed
write leaves the previous document untouched.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
import json
import os
from pathlib import Path
import tempfile
from typing import Any

from loguru import logger

from core.errors import CorruptDataError, PersistenceError
from core.models import Album, ImageItem, Trip
from infrastructure.utils import format_date, parse_date, timestamp

ALBUM_DOC_SUFFIX = "_images.json"
TRIPS_DOC_NAME = "trips.json"


def _atomic_write_json(path: Path, payload: Any) -> None:
    """Serialize `payload` to `path` atomically or raise `PersistenceError`."""
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
        ) as f:
            tmp_name = f.name
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError) as ex:
        logger.error("Write failed for {}: {}", path, ex)
        if tmp_name:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
        raise PersistenceError(f"Failed to write {path}: {ex}") from ex


def _read_json(path: Path) -> Any:
    """Return parsed JSON at `path`, or None if the file does not exist."""
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, UnicodeDecodeError) as ex:
        raise CorruptDataError(str(path), str(ex)) from ex
    except OSError as ex:
        raise PersistenceError(f"Failed to read {path}: {ex}") from ex


def _quarantine(path: Path) -> Path | None:
    """Rename a corrupt document aside so later saves do not overwrite it."""
    if not path.exists():
        return None
    target = path.with_name(f"{path.name}.corrupt-{timestamp()}")
    try:
        os.replace(path, target)
    except OSError as ex:
        logger.error("Quarantine failed for {}: {}", path, ex)
        return None
    logger.warning("Corrupt document preserved as {}", target)
    return target


class JsonAlbumRepository:
    """Load and save one album's photo metadata as a JSON document."""

    def __init__(self, data_dir: str | Path) -> None:
        self._dir = Path(data_dir)

    def document_path(self, album_id: str) -> Path:
        """Deterministic document location for `album_id`."""
        return self._dir / f"{album_id}{ALBUM_DOC_SUFFIX}"

    def save(self, album_id: str, photos: Iterable[ImageItem]) -> None:
        """Overwrite the album document with `photos` in order."""
        payload = [{"id": p.id, "image_path": p.image_path} for p in photos]
        _atomic_write_json(self.document_path(album_id), payload)
        logger.debug("Saved {} photos for album {}", len(payload), album_id)

    def load(self, album_id: str) -> list[ImageItem]:
        """Return the stored photos for `album_id`; `[]` if never saved.

        Raises:
            CorruptDataError: The document exists but does not match the schema.
            PersistenceError: The document could not be read.
        """
        path = self.document_path(album_id)
        raw = _read_json(path)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise CorruptDataError(str(path), "expected a list of photo records")
        photos: list[ImageItem] = []
        for idx, row in enumerate(raw):
            if not isinstance(row, dict):
                raise CorruptDataError(str(path), f"record {idx} is not an object")
            photo_id = row.get("id")
            image_path = row.get("image_path")
            if not isinstance(photo_id, str) or not isinstance(image_path, str):
                raise CorruptDataError(str(path), f"record {idx} lacks id/image_path")
            photos.append(ImageItem(id=photo_id, image_path=image_path))
        return photos

    def quarantine(self, album_id: str) -> Path | None:
        """Preserve a corrupt album document for diagnosis."""
        return _quarantine(self.document_path(album_id))

    def delete_document(self, album_id: str) -> None:
        """Remove the album document; a missing document is ignored."""
        path = self.document_path(album_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as ex:
            logger.error("Delete album document failed for {}: {}", path, ex)


def _trip_to_dict(trip: Trip) -> dict[str, Any]:
    return {
        "id": trip.id,
        "name": trip.name,
        "description": trip.description,
        "begin_date": format_date(trip.begin_date),
        "end_date": format_date(trip.end_date),
        "location": trip.location,
        "albums": [{"id": a.id, "name": a.name} for a in trip.albums],
    }


def _trip_from_dict(row: dict[str, Any]) -> Trip:
    """Build a `Trip` from a stored row; raise ValueError on bad fields."""
    trip_id = row.get("id")
    name = row.get("name")
    if not isinstance(trip_id, str) or not isinstance(name, str):
        raise ValueError("trip lacks id/name")
    begin = parse_date(row.get("begin_date")) or date.today()
    end = parse_date(row.get("end_date")) or begin
    stored_albums = row.get("albums")
    if stored_albums is None:
        stored_albums = []
    if not isinstance(stored_albums, list):
        raise ValueError("trip albums is not a list")
    albums: list[Album] = []
    for a in stored_albums:
        if isinstance(a, dict) and isinstance(a.get("id"), str) and isinstance(a.get("name"), str):
            albums.append(Album(id=a["id"], name=a["name"]))
        else:
            logger.warning("Skipping malformed album in trip {}: {}", trip_id, a)
    return Trip(
        id=trip_id,
        name=name,
        description=str(row.get("description") or ""),
        begin_date=begin,
        end_date=end,
        location=str(row.get("location") or ""),
        albums=albums,
    )


class JsonTripRepository:
    """Load and save the trip journal (trips plus their album lists)."""

    def __init__(self, data_dir: str | Path) -> None:
        self._path = Path(data_dir) / TRIPS_DOC_NAME

    @property
    def path(self) -> Path:
        return self._path

    def save(self, trips: Iterable[Trip]) -> None:
        """Overwrite the journal document with `trips` in order."""
        _atomic_write_json(self._path, {"trips": [_trip_to_dict(t) for t in trips]})

    def load(self) -> list[Trip] | None:
        """Return stored trips, or None when the journal was never saved.

        Malformed trip rows are logged and skipped; a malformed document
        raises `CorruptDataError`.
        """
        raw = _read_json(self._path)
        if raw is None:
            return None
        if not isinstance(raw, dict) or not isinstance(raw.get("trips"), list):
            raise CorruptDataError(str(self._path), "expected an object with a trips list")
        trips: list[Trip] = []
        for row in raw["trips"]:
            try:
                if not isinstance(row, dict):
                    raise ValueError("trip is not an object")
                trips.append(_trip_from_dict(row))
            except ValueError as ex:
                logger.error("Trip row error: {} | row={}", ex, row)
                continue
        return trips

    def quarantine(self) -> Path | None:
        """Preserve a corrupt journal document for diagnosis."""
        return _quarantine(self._path)
