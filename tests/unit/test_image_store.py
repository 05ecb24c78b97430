"""Unit tests for the photo file store."""

from pathlib import Path

from PIL import Image
import pytest

from core.errors import InvalidImageError
from infrastructure import delete_service
from infrastructure.delete_service import DeleteService
from infrastructure.image_store import (
    PLACEHOLDER_COLOR,
    PLACEHOLDER_SIDE,
    ImageStore,
    detect_extension,
)


def test_detect_extension(image_bytes):
    assert detect_extension(image_bytes("PNG")) == ".png"
    assert detect_extension(image_bytes("JPEG")) == ".jpg"
    assert detect_extension(image_bytes("GIF")) == ".gif"


@pytest.mark.parametrize("data", [b"", b"definitely not an image"])
def test_detect_extension_rejects_non_images(data):
    with pytest.raises(InvalidImageError):
        detect_extension(data)


def test_save_image_writes_dedicated_file(image_store, images_dir, image_bytes):
    """Bytes are written unchanged to a fresh `<uuid>.<ext>` file."""
    data = image_bytes("PNG")
    item = image_store.save_image(data)

    path = Path(item.image_path)
    assert path.parent == images_dir
    assert path.suffix == ".png"
    assert path.read_bytes() == data
    assert item.id

    other = image_store.save_image(data)
    assert other.id != item.id
    assert other.image_path != item.image_path


def test_save_invalid_image_writes_nothing(image_store, images_dir):
    with pytest.raises(InvalidImageError):
        image_store.save_image(b"garbage")
    assert not images_dir.exists() or not any(images_dir.iterdir())


def test_delete_photo_file(image_store, image_bytes):
    item = image_store.save_image(image_bytes())
    assert image_store.delete_photo_file(item.image_path) is True
    assert not Path(item.image_path).exists()


def test_delete_missing_photo_file_is_ignored(image_store, images_dir):
    """Deleting an absent file reports False instead of raising."""
    assert image_store.delete_photo_file(str(images_dir / "gone.png")) is False


def test_delete_to_trash(images_dir, image_bytes, monkeypatch):
    trashed = []
    monkeypatch.setattr(delete_service, "send2trash", trashed.append)
    store = ImageStore(images_dir, delete_service=DeleteService(), delete_to_trash=True)
    item = store.save_image(image_bytes())

    assert store.delete_photo_file(item.image_path) is True
    assert len(trashed) == 1
    assert Path(trashed[0]).name == Path(item.image_path).name


def test_thumbnail_of_missing_file_is_placeholder(image_store, images_dir):
    thumb = image_store.load_thumbnail(str(images_dir / "missing.png"), 120)
    assert thumb.size == (PLACEHOLDER_SIDE, PLACEHOLDER_SIDE)
    assert thumb.getpixel((0, 0)) == PLACEHOLDER_COLOR


def test_thumbnail_is_bounded(image_store, image_bytes):
    item = image_store.save_image(image_bytes("PNG", size=(400, 200)))
    thumb = image_store.load_thumbnail(item.image_path, 100)
    assert thumb.size == (100, 50)
    # Second request served from cache
    assert image_store.load_thumbnail(item.image_path, 100) is thumb


def test_thumbnail_of_oversized_image_is_placeholder(image_store, image_bytes, monkeypatch):
    item = image_store.save_image(image_bytes("PNG", size=(300, 300)))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    thumb = image_store.load_thumbnail(item.image_path, 100)
    assert thumb.size == (PLACEHOLDER_SIDE, PLACEHOLDER_SIDE)
