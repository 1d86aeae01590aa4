"""
app/storage/base.py

Abstract interface for the object storage layer.

Design goals:
  - Services depend only on this interface, never on a concrete backend.
  - Storage is injected into UploadService; nothing in the multipart or
    filetype packages ever constructs a client.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta


class ObjectStorage(ABC):
    """
    Contract every storage backend must fulfil.

    Objects are addressed by ``container`` (one per owner) plus a
    ``directory/file_name`` path inside it.
    """

    @abstractmethod
    def upload(
        self,
        container: str,
        directory: str,
        file_name: str,
        data: bytes,
        content_type: str,
    ) -> str:
        """
        Store ``data`` and return its path inside the container.

        Re-uploading the same path overwrites the previous object.

        Raises:
            StorageError: If the backend operation fails.
        """

    @abstractmethod
    def generate_url(self, container: str, path: str, expires_in: timedelta) -> str:
        """
        Return a URL the client can fetch the object from.

        Args:
            container  : Container the object lives in.
            path       : Path returned by ``upload``.
            expires_in : How long the URL should remain valid.

        Raises:
            StorageError: If the object does not exist or the URL cannot be built.
        """
