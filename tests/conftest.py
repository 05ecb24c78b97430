"""Shared pytest fixtures."""

import io
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from infrastructure.delete_service import DeleteService
from infrastructure.image_store import ImageStore
from infrastructure.json_repository import JsonAlbumRepository, JsonTripRepository


def make_image_bytes(fmt: str = "PNG", color: str = "red", size=(8, 8)) -> bytes:
    """Encode a small solid-color image."""
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Factory for encoded test images."""
    return make_image_bytes


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def images_dir(tmp_path: Path) -> Path:
    return tmp_path / "images"


@pytest.fixture
def album_repo(data_dir: Path) -> JsonAlbumRepository:
    return JsonAlbumRepository(data_dir)


@pytest.fixture
def trip_repo(data_dir: Path) -> JsonTripRepository:
    return JsonTripRepository(data_dir)


@pytest.fixture
def image_store(images_dir: Path) -> ImageStore:
    return ImageStore(images_dir, delete_service=DeleteService(), mem_cache=16)
