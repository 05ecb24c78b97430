"""Desktop image source built on Qt file dialogs."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from PySide6.QtWidgets import QFileDialog
from loguru import logger

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.heic *.heif *.gif *.bmp *.tif *.tiff *.webp)"


def _read_bytes(path: str) -> bytes:
    return Path(path).read_bytes()


class QtImageSource:
    """`ImageSource` for desktop hosts.

    The dialogs run on the calling (UI) thread; file reads run in worker
    threads and are joined before returning.
    """

    def __init__(self, parent: Any = None, name_filter: str = IMAGE_FILTER) -> None:
        self._parent = parent
        self._filter = name_filter

    async def pick(self) -> list[bytes]:
        """Let the user pick any number of images; `[]` on cancel."""
        paths, _ = QFileDialog.getOpenFileNames(self._parent, "Pick from Library", "", self._filter)
        if not paths:
            return []
        results = await asyncio.gather(
            *(asyncio.to_thread(_read_bytes, p) for p in paths), return_exceptions=True
        )
        images: list[bytes] = []
        for path, res in zip(paths, results):
            if isinstance(res, BaseException):
                logger.error("Error loading image {}: {}", path, res)
                continue
            images.append(res)
        return images

    async def capture(self) -> bytes | None:
        """Single-image pick; there is no camera to capture from on desktop."""
        logger.info("Camera not available; falling back to photo library.")
        path, _ = QFileDialog.getOpenFileName(self._parent, "Take a Picture", "", self._filter)
        if not path:
            return None
        try:
            return await asyncio.to_thread(_read_bytes, path)
        except OSError as ex:
            logger.error("Error loading image {}: {}", path, ex)
            return None
