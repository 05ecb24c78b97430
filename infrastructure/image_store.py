"""Photo file storage, thumbnailing and caching utilities.

Picked or captured image bytes are written unchanged to one file per photo in
the app's private images directory; only the small `ImageItem` record goes into
the album document. Thumbnails are decoded with Pillow (HEIC/HEIF through
pillow-heif) and kept in a small in-memory LRU cache.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import hashlib
import io
import os
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError
from loguru import logger
from pillow_heif import register_heif_opener

from core.errors import InvalidImageError, PersistenceError
from core.models import ImageItem
from infrastructure.delete_service import DeleteService
from infrastructure.utils import new_identifier, photo_file_name

register_heif_opener()

PLACEHOLDER_SIDE = 64
PLACEHOLDER_COLOR = (220, 220, 220)

_FORMAT_EXTENSIONS = {
    "JPEG": ".jpg",
    "MPO": ".jpg",
    "PNG": ".png",
    "GIF": ".gif",
    "BMP": ".bmp",
    "TIFF": ".tiff",
    "WEBP": ".webp",
    "HEIF": ".heic",
}


def _compute_cache_key(path: str, size_key: int) -> str:
    """Compute a stable cache key from path, mtime, size, and requested side."""
    try:
        st = os.stat(path)
        sig = f"{path}|{int(st.st_mtime_ns)}|{int(st.st_size)}|{int(size_key)}".encode(
            "utf-8", errors="ignore"
        )
    except OSError:
        sig = f"{path}|0|0|{int(size_key)}".encode("utf-8", errors="ignore")
    return hashlib.sha1(sig).hexdigest()


def detect_extension(data: bytes) -> str:
    """Return the file extension matching the image format of `data`.

    Raises:
        InvalidImageError: `data` is not a decodable image.
    """
    if not data:
        raise InvalidImageError("empty image data")
    try:
        with Image.open(io.BytesIO(data)) as im:
            fmt = (im.format or "").upper()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as ex:
        raise InvalidImageError(f"unrecognized image data: {ex}") from ex
    if not fmt:
        raise InvalidImageError("image format could not be determined")
    return _FORMAT_EXTENSIONS.get(fmt, f".{fmt.lower()}")


def make_placeholder() -> Image.Image:
    """Grey square shown in place of a missing or unreadable photo."""
    return Image.new("RGB", (PLACEHOLDER_SIDE, PLACEHOLDER_SIDE), PLACEHOLDER_COLOR)


@dataclass
class _MemCacheItem:
    key: str
    image: Image.Image


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> Image.Image | None:
        """Return cached image for key, moving it to the MRU position."""
        item = self._data.get(key)
        if not item:
            return None
        self._data.move_to_end(key)
        return item.image

    def put(self, key: str, image: Image.Image) -> None:
        """Insert or update `key` with `image`, evicting LRU when over capacity."""
        if key in self._data:
            self._data.move_to_end(key)
        self._data[key] = _MemCacheItem(key, image)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)


class ImageStore:
    """Writes, deletes and thumbnails per-photo image files."""

    def __init__(
        self,
        images_dir: str | Path,
        delete_service: DeleteService | None = None,
        mem_cache: int = 256,
        delete_to_trash: bool = False,
    ) -> None:
        self._dir = Path(images_dir)
        self._deleter = delete_service or DeleteService()
        self._delete_to_trash = delete_to_trash
        self._mem_cache = _LRUCache(mem_cache)

    @property
    def images_dir(self) -> Path:
        return self._dir

    def save_image(self, data: bytes) -> ImageItem:
        """Write `data` to a fresh per-photo file and return its record.

        Raises:
            InvalidImageError: `data` is not an image.
            PersistenceError: The file could not be written.
        """
        ext = detect_extension(data)
        path = self._dir / photo_file_name(ext)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            with path.open("xb") as f:
                f.write(data)
        except OSError as ex:
            logger.error("Save image failed for {}: {}", path, ex)
            try:
                path.unlink()
            except OSError:
                pass
            raise PersistenceError(f"Failed to write {path}: {ex}") from ex
        logger.info("Image saved: {} ({} bytes)", path, len(data))
        return ImageItem(id=new_identifier(), image_path=str(path))

    def delete_photo_file(self, image_path: str) -> bool:
        """Remove the image file behind a photo record.

        Failures are logged and otherwise ignored so the metadata record can
        still be removed. Returns True when the file was removed.
        """
        result = self._deleter.delete_files([image_path], to_trash=self._delete_to_trash)
        for path, reason in result.failed:
            logger.warning("Photo file not removed {}: {}", path, reason)
        return bool(result.success_paths)

    def exists(self, image_path: str) -> bool:
        return os.path.isfile(image_path)

    def load_thumbnail(self, image_path: str, side: int) -> Image.Image:
        """Return a thumbnail bounded by `side`, or a placeholder."""
        key = _compute_cache_key(image_path, side)
        img = self._mem_cache.get(key)
        if img is not None:
            return img

        img = self._load_from_source(image_path, side)
        if img is None:
            img = make_placeholder()
        self._mem_cache.put(key, img)
        return img

    def _load_from_source(self, image_path: str, side: int) -> Image.Image | None:
        try:
            with Image.open(image_path) as im:
                try:
                    im = ImageOps.exif_transpose(im)
                except (OSError, ValueError, AttributeError):
                    pass
                im = im.convert("RGB")
                if side and side > 0:
                    im.thumbnail((side, side), Image.Resampling.LANCZOS)
                return im.copy()
        except (OSError, ValueError, Image.DecompressionBombError) as ex:
            logger.debug("Thumbnail load failed for {}: {}", image_path, ex)
            return None
