"""
Durable mention cursor.

A single plaintext file holding the ID of the last fully handled mention.
The file is overwritten on every advance; a missing or empty file means
"no cursor".
"""

import logging
import os
from pathlib import Path

from services.errors import FileSystemError, Result

logger = logging.getLogger(__name__)


def is_newer(candidate: str, current: str | None) -> bool:
    """Return True if tweet ID candidate sorts after current."""
    if current is None:
        return True
    return int(candidate) > int(current)


class CursorStore:
    """File-backed single-value store for the last mention ID."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Result[str | None]:
        """
        Read the cursor.

        Returns:
            Result with the stored ID, or None if the file does not exist or
            is empty. Unreadable files are a FileSystemError.
        """
        try:
            content = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            logger.info(f"[CURSOR] No cursor at {self.path}, starting fresh")
            return Result.success(None)
        except OSError as e:
            return Result.failure(FileSystemError(f"could not read {self.path}", e))

        if not content:
            return Result.success(None)

        if not content.isdigit():
            return Result.failure(FileSystemError(f"{self.path} does not hold a tweet ID: {content!r}"))

        logger.info(f"[CURSOR] Loaded cursor {content}")
        return Result.success(content)

    def save(self, mention_id: str) -> Result[None]:
        """
        Overwrite the cursor with mention_id.

        Writes to a sibling temp file first and replaces the target, so a
        crash mid-write leaves the previous value intact.
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(mention_id, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            return Result.failure(FileSystemError(f"could not write {self.path}", e))

        logger.debug(f"[CURSOR] Saved cursor {mention_id}")
        return Result.success()
