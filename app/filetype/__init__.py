"""app/filetype/__init__.py — public API of the filetype package."""

from app.filetype.sniffer import FileKind, FileSignatureSniffer, sniff
from app.filetype.validator import (
    FileCategory,
    FileTypeValidator,
    extension_for_mime,
    file_extension,
    mime_type_for,
)

__all__ = [
    "FileCategory",
    "FileKind",
    "FileSignatureSniffer",
    "FileTypeValidator",
    "extension_for_mime",
    "file_extension",
    "mime_type_for",
    "sniff",
]
