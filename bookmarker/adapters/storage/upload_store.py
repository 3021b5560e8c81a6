"""
On-disk storage for uploaded PDFs.

Uploads are written under generated ids (`<hex>.pdf`). Files older than
the configured TTL are removed by sweep().
"""
import logging
import re
import time
import uuid
from pathlib import Path
from typing import List, Optional, Union

import aiofiles

from bookmarker.core.exceptions import StorageError

logger = logging.getLogger(__name__)

UPLOAD_ID_PATTERN = re.compile(r"^[0-9a-f]{32}\.pdf$")


class UploadStore:
    """Directory of uploaded documents keyed by upload id."""

    def __init__(self, upload_dir: Union[str, Path]):
        """Initialize store, creating the directory if needed.

        Args:
            upload_dir: Directory holding uploads
        """
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def is_valid_id(upload_id: str) -> bool:
        return bool(upload_id) and bool(UPLOAD_ID_PATTERN.match(upload_id))

    def path_for(self, upload_id: str) -> Path:
        """Path of an upload.

        Raises:
            StorageError: upload_id is not a well-formed id
        """
        if not self.is_valid_id(upload_id):
            raise StorageError(f"Invalid upload id: {upload_id!r}")
        return self.upload_dir / upload_id

    def exists(self, upload_id: str) -> bool:
        return self.is_valid_id(upload_id) and self.path_for(upload_id).exists()

    async def save(self, content: bytes) -> str:
        """Write an upload to disk.

        Returns:
            Generated upload id
        """
        upload_id = f"{uuid.uuid4().hex}.pdf"
        path = self.upload_dir / upload_id
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise StorageError(f"Failed to store upload: {e}") from e
        logger.info(f"Stored upload {upload_id} ({len(content)} bytes)")
        return upload_id

    def safe_unlink(self, path: Optional[Path]) -> bool:
        """Delete a file if present; failures are logged, not raised."""
        try:
            if path and path.exists():
                path.unlink()
                return True
        except OSError as e:
            logger.warning(f"Failed to delete file {path}: {e}")
        return False

    def discard(self, upload_id: str) -> None:
        """Remove an upload."""
        if not self.is_valid_id(upload_id):
            return
        self.safe_unlink(self.path_for(upload_id))

    def sweep(self, ttl_seconds: float, now: Optional[float] = None) -> List[str]:
        """Delete files older than ttl_seconds.

        Args:
            ttl_seconds: Maximum file age by modification time
            now: Reference timestamp (default: current time)

        Returns:
            Names of removed files
        """
        now = time.time() if now is None else now
        removed = []
        try:
            entries = list(self.upload_dir.iterdir())
        except OSError as e:
            logger.warning(f"Sweep failed: {e}")
            return removed

        for entry in entries:
            try:
                if not entry.is_file():
                    continue
                age = now - entry.stat().st_mtime
            except OSError as e:
                logger.warning(f"Skipping {entry} during sweep: {e}")
                continue
            if age > ttl_seconds and self.safe_unlink(entry):
                removed.append(entry.name)

        if removed:
            logger.info(f"Swept {len(removed)} expired uploads")
        return removed
