"""File deletion service.

Removes photo files either permanently or by moving them to the recycle bin,
and reports per-path results instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable
import os

from loguru import logger
from send2trash import send2trash

from core.services.interfaces import DeleteResult


class DeleteService:
    """Deletes files and collects per-path outcomes."""

    def delete_files(self, paths: Iterable[str], to_trash: bool = False) -> DeleteResult:
        """Delete `paths` and report per-path results.

        Args:
            paths: Files to delete.
            to_trash: Move files to the recycle bin instead of unlinking them.
        """
        success: list[str] = []
        failed: list[tuple[str, str]] = []
        for p in paths:
            normalized_path = os.path.normpath(p)
            if not os.path.exists(normalized_path):
                logger.warning("File does not exist: {}", normalized_path)
                failed.append((p, "File does not exist"))
                continue
            try:
                if to_trash:
                    send2trash(normalized_path)
                else:
                    os.remove(normalized_path)
                success.append(p)
            except (UnicodeEncodeError, OSError) as ex:
                logger.error("Delete failed for {}: {}", normalized_path, ex)
                failed.append((p, str(ex)))
        if success:
            logger.info(
                "Deleted {} file(s){}", len(success), " to recycle bin" if to_trash else ""
            )
        return DeleteResult(success_paths=success, failed=failed)
