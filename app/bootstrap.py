"""Wires settings into repositories, services and view-models."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.viewmodels.album_vm import AlbumVM
from app.viewmodels.discover_vm import DiscoverVM
from app.viewmodels.journal_vm import JournalVM
from app.viewmodels.notices import NoticeBoard
from core.models import Album
from infrastructure.delete_service import DeleteService
from infrastructure.image_store import ImageStore
from infrastructure.json_repository import JsonAlbumRepository, JsonTripRepository
from infrastructure.location import FixedLocationProvider
from infrastructure.places_client import GooglePlacesClient
from infrastructure.settings import JsonSettings


@dataclass
class AppContext:
    settings: JsonSettings
    album_repo: JsonAlbumRepository
    image_store: ImageStore
    journal: JournalVM
    discover: DiscoverVM
    notices: NoticeBoard = field(default_factory=NoticeBoard)

    def open_album(self, album: Album) -> AlbumVM:
        """Return a view-model for `album`; call `activate()` before use."""
        return AlbumVM(album, self.album_repo, self.image_store, notices=self.notices)


def build_app(settings: JsonSettings, notices: NoticeBoard | None = None) -> AppContext:
    notices = notices or NoticeBoard()
    data_dir = settings.get_path("storage.data_dir")
    images_dir = settings.get_path("storage.images_dir")

    album_repo = JsonAlbumRepository(data_dir)
    image_store = ImageStore(
        images_dir,
        delete_service=DeleteService(),
        mem_cache=int(settings.get("thumbnails.mem_cache", 256) or 256),
        delete_to_trash=bool(settings.get("photos.delete_to_trash", False)),
    )
    journal = JournalVM(
        JsonTripRepository(data_dir),
        album_repo=album_repo,
        image_store=image_store,
        notices=notices,
        cascade_deletes=bool(settings.get("journal.cascade_deletes", False)),
    )
    places = GooglePlacesClient(
        api_key=str(settings.get("places.api_key", "") or ""),
        placeholder_url=str(settings.get("places.placeholder_url")),
        timeout=float(settings.get("places.timeout", 10.0)),
    )
    discover = DiscoverVM(
        FixedLocationProvider.from_settings(settings),
        places,
        places,
        radius=int(settings.get("places.radius_m", 5000)),
    )
    return AppContext(
        settings=settings,
        album_repo=album_repo,
        image_store=image_store,
        journal=journal,
        discover=discover,
        notices=notices,
    )
