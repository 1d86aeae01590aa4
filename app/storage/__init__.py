"""app/storage/__init__.py — public API of the storage package."""

from app.storage.base import ObjectStorage
from app.storage.local_store import LocalObjectStorage

__all__ = [
    "ObjectStorage",
    "LocalObjectStorage",
]
