"""ViewModel for one album's photo grid."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from loguru import logger

from app.viewmodels.notices import NoticeBoard
from core.errors import CorruptDataError, PersistenceError
from core.models import Album, ImageItem
from core.services import collection_service as coll
from core.services.interfaces import DeletePlan, ImageSource


class AlbumVM:
    """Mediates between an album, its JSON document and the image files.

    The photo list is loaded on `activate` and written through on every
    structural change (add, delete, move) as well as on `deactivate`. File I/O
    runs in worker threads; the photo list itself is only replaced on the
    event loop, one assignment per user action.
    """

    def __init__(self, album: Album, repo, image_store, notices: NoticeBoard | None = None) -> None:
        """Create an AlbumVM.

        Args:
            album: The album being shown.
            repo: Repository with `load(album_id)`, `save(album_id, photos)`
                and `quarantine(album_id)`.
            image_store: Store with `save_image`, `delete_photo_file` and
                `load_thumbnail`.
            notices: Sink for non-blocking failure notices.
        """
        self.album = album
        self._repo = repo
        self._images = image_store
        self.notices = notices or NoticeBoard()
        self.is_active = False
        self.save_pending = False
        self.writes_blocked = False
        self._save_lock: asyncio.Lock | None = None
        self._save_lock_loop = None

    @property
    def photos(self) -> list[ImageItem]:
        return self.album.photos

    def _publish(self, photos: list[ImageItem]) -> None:
        self.album.photos = photos

    # Lifecycle
    async def activate(self) -> None:
        """Load the album's photos from storage."""
        album_id = self.album.id
        # A document that could not be read (or set aside) must not be
        # overwritten until a later activate reads it successfully.
        self.writes_blocked = False
        try:
            photos = await asyncio.to_thread(self._repo.load, album_id)
        except CorruptDataError as ex:
            moved = await asyncio.to_thread(self._repo.quarantine, album_id)
            self.writes_blocked = moved is None
            self.notices.post(f"Photos of '{self.album.name}' could not be read: {ex.reason}")
            photos = []
        except PersistenceError as ex:
            self.writes_blocked = True
            self.notices.post(f"Photos of '{self.album.name}' could not be read: {ex}")
            photos = []
        self._publish(photos)
        self.is_active = True
        logger.info("Album {} active with {} photo(s)", album_id, len(photos))

    async def deactivate(self) -> None:
        """Flush the photo list when the album view goes away."""
        if self.is_active:
            await self._persist()
        self.is_active = False

    def _lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._save_lock is None or self._save_lock_loop is not loop:
            self._save_lock = asyncio.Lock()
            self._save_lock_loop = loop
        return self._save_lock

    async def _persist(self) -> None:
        if self.writes_blocked:
            self.save_pending = True
            logger.warning("Not saving album {}: stored document was not read", self.album.id)
            return
        # Saves run one at a time and snapshot inside the lock, so the newest
        # photo list is always the last one written.
        async with self._lock():
            snapshot = list(self.photos)
            try:
                await asyncio.to_thread(self._repo.save, self.album.id, snapshot)
                self.save_pending = False
            except PersistenceError as ex:
                self.save_pending = True
                self.notices.post(f"Photos of '{self.album.name}' could not be saved: {ex}")

    async def retry_save(self) -> bool:
        """Retry a failed write-through; True when the document is saved."""
        await self._persist()
        return not self.save_pending

    # Adding
    async def add_images(self, batch: Iterable[bytes]) -> list[ImageItem]:
        """Store every image in `batch` and append them in one update.

        Images are written concurrently; the append happens only after all
        writes finished. Images that cannot be stored are logged and skipped.
        """
        data = [b for b in batch if b]
        if not data:
            return []
        results = await asyncio.gather(
            *(asyncio.to_thread(self._images.save_image, b) for b in data),
            return_exceptions=True,
        )
        added: list[ImageItem] = []
        for res in results:
            if isinstance(res, BaseException):
                logger.error("Error storing picked image: {}", res)
                continue
            added.append(res)
        if not added:
            return []
        self._publish([*self.photos, *added])
        logger.info("Added {} photo(s) to album {}", len(added), self.album.id)
        await self._persist()
        return added

    async def add_from_library(self, source: ImageSource) -> list[ImageItem]:
        """Run the picker; a canceled picker adds nothing."""
        picked = await source.pick()
        if not picked:
            return []
        return await self.add_images(picked)

    async def capture_photo(self, source: ImageSource) -> ImageItem | None:
        """Capture one photo; a canceled capture adds nothing."""
        data = await source.capture()
        if not data:
            return None
        added = await self.add_images([data])
        return added[0] if added else None

    # Deleting
    def plan_delete(self, photo_ids: Iterable[str]) -> DeletePlan:
        wanted = set(photo_ids)
        ids = [p.id for p in self.photos if p.id in wanted]
        return DeletePlan(
            kind="photo",
            ids=ids,
            title="Delete Selected Images",
            message=(
                "Are you sure you want to delete the selected images? "
                "This action cannot be undone."
            ),
        )

    def plan_delete_at(self, offsets: Iterable[int]) -> DeletePlan:
        return self.plan_delete(coll.ids_at_offsets(self.photos, offsets))

    async def confirm_delete(self, plan: DeletePlan) -> int:
        """Remove the planned photos' records and files; return the count removed."""
        if plan.kind != "photo" or plan.is_empty:
            return 0
        wanted = set(plan.ids)
        doomed = [p for p in self.photos if p.id in wanted]
        if not doomed:
            return 0
        for photo in doomed:
            await asyncio.to_thread(self._images.delete_photo_file, photo.image_path)
        self._publish(coll.remove_ids(self.photos, wanted))
        logger.info("Deleted {} photo(s) from album {}", len(doomed), self.album.id)
        await self._persist()
        return len(doomed)

    # Ordering
    async def move_photo(self, from_index: int, to_index: int) -> None:
        moved = coll.move_item(self.photos, from_index, to_index)
        if [p.id for p in moved] == [p.id for p in self.photos]:
            return
        self._publish(moved)
        await self._persist()

    def thumbnail(self, photo: ImageItem, side: int = 120):
        """Thumbnail for `photo`; a placeholder when its file is missing."""
        return self._images.load_thumbnail(photo.image_path, side)
