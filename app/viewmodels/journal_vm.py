"""ViewModel owning the trip list and each trip's albums."""

from __future__ import annotations

from collections.abc import Iterable
import dataclasses
from datetime import date

from loguru import logger

from app.viewmodels.notices import NoticeBoard
from core.errors import CorruptDataError, PersistenceError
from core.models import STARTER_ALBUM_NAMES, Album, Trip
from core.services import collection_service as coll
from core.services.interfaces import DeletePlan
from infrastructure.utils import new_identifier


def _starter_albums() -> list[Album]:
    return [Album(id=new_identifier(), name=name) for name in STARTER_ALBUM_NAMES]


def _seed_trips() -> list[Trip]:
    today = date.today()
    return [
        Trip(
            id=new_identifier(),
            name="Local Area",
            description="Explore your local area",
            begin_date=today,
            end_date=today,
            location="Home",
            albums=_starter_albums(),
        )
    ]


class JournalVM:
    """Application-state store for trips and albums.

    All mutations go through the methods below and are written through to the
    trip repository immediately. A failed write keeps the in-memory change and
    posts a notice; `retry_save` tries again.
    """

    def __init__(
        self,
        trip_repo,
        album_repo=None,
        image_store=None,
        notices: NoticeBoard | None = None,
        cascade_deletes: bool = False,
    ) -> None:
        """Create a JournalVM.

        Args:
            trip_repo: Repository with `load()`, `save(trips)` and `quarantine()`.
            album_repo: Album photo repository; required only for cascading deletes.
            image_store: Image file store; required only for cascading deletes.
            notices: Sink for non-blocking failure notices.
            cascade_deletes: Also remove album documents and photo files when
                trips or albums are deleted.
        """
        self._repo = trip_repo
        self._album_repo = album_repo
        self._image_store = image_store
        self._cascade = bool(cascade_deletes) and album_repo is not None
        self.notices = notices or NoticeBoard()
        self.trips: list[Trip] = []
        self.save_pending = False
        self.writes_blocked = False

    # Loading / saving
    def load(self) -> None:
        """Load trips from storage, seeding the default trip on first run.

        When the stored journal cannot be read, or a corrupt one cannot be
        set aside, writes stay blocked until a later `load` succeeds.
        """
        self.writes_blocked = False
        try:
            stored = self._repo.load()
        except CorruptDataError as ex:
            if self._repo.quarantine() is None:
                self.writes_blocked = True
                self.notices.post(f"Trip journal is unreadable and was left in place: {ex.reason}")
            else:
                self.notices.post(
                    f"Trip journal was unreadable and has been set aside: {ex.reason}"
                )
            stored = None
        except PersistenceError as ex:
            self.writes_blocked = True
            self.notices.post(f"Could not read trip journal: {ex}")
            self.trips = []
            return
        self.trips = stored if stored is not None else _seed_trips()
        logger.info("Journal loaded: {} trip(s)", len(self.trips))

    def _save(self) -> None:
        if self.writes_blocked:
            self.save_pending = True
            logger.warning("Not saving trip journal: stored journal was not read")
            return
        try:
            self._repo.save(self.trips)
            self.save_pending = False
        except PersistenceError as ex:
            self.save_pending = True
            self.notices.post(f"Changes could not be saved: {ex}")

    def retry_save(self) -> bool:
        """Retry a failed write-through; True when the journal is saved."""
        self._save()
        return not self.save_pending

    # Trips
    def get_trip(self, trip_id: str) -> Trip | None:
        idx = coll.index_of(self.trips, trip_id)
        return None if idx is None else self.trips[idx]

    def filtered_trips(self, query: str = "") -> list[Trip]:
        return coll.filter_by_name(self.trips, query)

    def add_trip(
        self,
        name: str,
        description: str = "",
        begin_date: date | None = None,
        end_date: date | None = None,
        location: str = "",
    ) -> Trip | None:
        """Append a new trip with the starter albums; None if `name` is blank."""
        if not name or not name.strip():
            return None
        begin = begin_date or date.today()
        trip = Trip(
            id=new_identifier(),
            name=name,
            description=description,
            begin_date=begin,
            end_date=end_date or begin,
            location=location,
            albums=_starter_albums(),
        )
        self.trips = [*self.trips, trip]
        logger.info("Trip added: {} ({})", trip.name, trip.id)
        self._save()
        return trip

    def edit_trip(self, updated: Trip) -> bool:
        """Replace the mutable fields of the trip with `updated.id`.

        Unknown ids and blank names are ignored. Albums are not touched.
        """
        idx = coll.index_of(self.trips, updated.id)
        if idx is None or not updated.name.strip():
            return False
        current = self.trips[idx]
        new_trips = list(self.trips)
        new_trips[idx] = dataclasses.replace(
            current,
            name=updated.name,
            description=updated.description,
            begin_date=updated.begin_date,
            end_date=updated.end_date,
            location=updated.location,
        )
        self.trips = new_trips
        self._save()
        return True

    def plan_delete_trip(self, trip_id: str) -> DeletePlan | None:
        trip = self.get_trip(trip_id)
        if trip is None:
            return None
        return DeletePlan(
            kind="trip",
            ids=[trip.id],
            title="Delete Trip",
            message="Are you sure you want to delete this trip?",
        )

    def plan_delete_trips_at(self, offsets: Iterable[int]) -> DeletePlan:
        ids = coll.ids_at_offsets(self.trips, offsets)
        return DeletePlan(
            kind="trip",
            ids=ids,
            title="Delete Trip",
            message=f"Are you sure you want to delete {len(ids)} trip(s)?",
        )

    # Albums
    def albums(self, trip_id: str) -> list[Album]:
        trip = self.get_trip(trip_id)
        return list(trip.albums) if trip else []

    def filtered_albums(self, trip_id: str, query: str = "") -> list[Album]:
        return coll.filter_by_name(self.albums(trip_id), query)

    def get_album(self, trip_id: str, album_id: str) -> Album | None:
        albums = self.albums(trip_id)
        idx = coll.index_of(albums, album_id)
        return None if idx is None else albums[idx]

    def _replace_albums(self, trip_id: str, albums: list[Album]) -> bool:
        idx = coll.index_of(self.trips, trip_id)
        if idx is None:
            return False
        new_trips = list(self.trips)
        new_trips[idx] = dataclasses.replace(self.trips[idx], albums=albums)
        self.trips = new_trips
        return True

    def add_album(self, trip_id: str, name: str) -> Album | None:
        """Append a new album to the trip; None for blank names or unknown trips."""
        trip = self.get_trip(trip_id)
        if trip is None or not name or not name.strip():
            return None
        album = Album(id=new_identifier(), name=name)
        self._replace_albums(trip_id, [*trip.albums, album])
        logger.info("Album added: {} to trip {}", album.name, trip_id)
        self._save()
        return album

    def edit_album(self, trip_id: str, updated: Album) -> bool:
        """Rename the album with `updated.id`; unknown ids are ignored."""
        albums = self.albums(trip_id)
        idx = coll.index_of(albums, updated.id)
        if idx is None or not updated.name.strip():
            return False
        # Renamed in place: an open AlbumVM holds this same object.
        albums[idx].name = updated.name
        self._save()
        return True

    def plan_delete_album(self, trip_id: str, album_id: str) -> DeletePlan | None:
        if self.get_album(trip_id, album_id) is None:
            return None
        return DeletePlan(
            kind="album",
            ids=[album_id],
            title="Delete Album",
            message="Are you sure you want to delete this album?",
            owner_id=trip_id,
        )

    def plan_delete_albums_at(self, trip_id: str, offsets: Iterable[int]) -> DeletePlan:
        ids = coll.ids_at_offsets(self.albums(trip_id), offsets)
        return DeletePlan(
            kind="album",
            ids=ids,
            title="Delete Album",
            message=f"Are you sure you want to delete {len(ids)} album(s)?",
            owner_id=trip_id,
        )

    # Confirmation
    def confirm_delete(self, plan: DeletePlan) -> int:
        """Execute a confirmed plan; return the number of entities removed."""
        if plan.is_empty:
            return 0
        if plan.kind == "trip":
            return self._delete_trips(plan.ids)
        if plan.kind == "album" and plan.owner_id:
            return self._delete_albums(plan.owner_id, plan.ids)
        logger.warning("Unsupported delete plan: {}", plan.kind)
        return 0

    def _delete_trips(self, ids: list[str]) -> int:
        wanted = set(ids)
        doomed = [t for t in self.trips if t.id in wanted]
        if not doomed:
            return 0
        self.trips = coll.remove_ids(self.trips, ids)
        logger.info("Deleted {} trip(s)", len(doomed))
        if self._cascade:
            for trip in doomed:
                self._purge_albums(trip.albums)
        self._save()
        return len(doomed)

    def _delete_albums(self, trip_id: str, ids: list[str]) -> int:
        albums = self.albums(trip_id)
        wanted = set(ids)
        doomed = [a for a in albums if a.id in wanted]
        if not doomed:
            return 0
        self._replace_albums(trip_id, coll.remove_ids(albums, ids))
        logger.info("Deleted {} album(s) from trip {}", len(doomed), trip_id)
        if self._cascade:
            self._purge_albums(doomed)
        self._save()
        return len(doomed)

    def _purge_albums(self, albums: Iterable[Album]) -> None:
        """Remove the stored photo documents and files of deleted albums."""
        for album in albums:
            try:
                photos = self._album_repo.load(album.id)
            except CorruptDataError:
                logger.warning("Keeping corrupt document of deleted album {}", album.id)
                continue
            except PersistenceError as ex:
                logger.error("Could not read deleted album {}: {}", album.id, ex)
                continue
            if self._image_store is not None:
                for photo in photos:
                    self._image_store.delete_photo_file(photo.image_path)
            self._album_repo.delete_document(album.id)
