"""Non-blocking user notices raised by background failures."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger


class NoticeBoard:
    """Collects notices and forwards them to an optional UI callback."""

    def __init__(self, on_notice: Callable[[str], None] | None = None) -> None:
        self.notices: list[str] = []
        self._on_notice = on_notice

    def post(self, message: str) -> None:
        logger.warning("Notice: {}", message)
        self.notices.append(message)
        if self._on_notice is not None:
            self._on_notice(message)
