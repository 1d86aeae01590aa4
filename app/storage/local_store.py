"""
app/storage/local_store.py

Filesystem implementation of the ObjectStorage interface.

Objects are written to ``{root}/{container}/{directory}/{file_name}``.
URLs are ``file://`` URIs carrying an ``expires`` query parameter so the
response shape matches that of a signed-URL backend.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import StorageError
from app.core.logger import get_logger
from app.storage.base import ObjectStorage

logger = get_logger(__name__)


class LocalObjectStorage(ObjectStorage):
    """ObjectStorage backed by a local directory tree."""

    def __init__(self, root: str | None = None) -> None:
        """
        Args:
            root : Base directory for all containers.
                   Defaults to ``settings.storage_root``.
        """
        self._root = Path(root or settings.storage_root).resolve()
        logger.info("Initialising LocalObjectStorage — root=%s", self._root)

    # ── Public API ─────────────────────────────────────────────────────────────

    def upload(
        self,
        container: str,
        directory: str,
        file_name: str,
        data: bytes,
        content_type: str,
    ) -> str:
        path = f"{directory.strip('/')}/{file_name}" if directory.strip("/") else file_name
        target = self._resolve(container, path)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to write '{path}' to '{container}': {exc}") from exc

        logger.info(
            "Stored %d byte(s) at %s/%s (%s).", len(data), container, path, content_type
        )
        return path

    def generate_url(self, container: str, path: str, expires_in: timedelta) -> str:
        target = self._resolve(container, path)
        if not target.is_file():
            raise StorageError(f"Object not found: '{container}/{path}'")

        expires_at = datetime.now(timezone.utc) + expires_in
        return f"{target.as_uri()}?expires={expires_at.strftime('%Y-%m-%dT%H:%M:%SZ')}"

    # ── Internals ──────────────────────────────────────────────────────────────

    def _resolve(self, container: str, path: str) -> Path:
        """Map ``container/path`` under the root, refusing anything that escapes it."""
        if not container or not path:
            raise StorageError("Container and path must not be empty.")

        target = (self._root / container / path).resolve()
        container_dir = (self._root / container).resolve()
        if self._root not in container_dir.parents or container_dir not in target.parents:
            raise StorageError(f"Path escapes storage root: '{container}/{path}'")
        return target
