"""
app/filetype/validator.py

Cross-checks an upload's declared extension against its real signature.

An upload passes only if both checks agree:

    extension in the category's allow-list
      AND
    sniffed FileKind in the category's accepted kinds

``bmp`` has no signature in the sniffer and passes on extension alone.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from app.core.constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    ALLOWED_PDF_EXTENSIONS,
    MIME_TYPES,
    DEFAULT_MIME_TYPE,
    UNSIGNED_EXTENSIONS,
)
from app.core.exceptions import UnsupportedFileFormatError
from app.core.logger import get_logger
from app.filetype.sniffer import FileKind, FileSignatureSniffer

logger = get_logger(__name__)


class FileCategory(str, Enum):
    """What kind of upload an endpoint expects."""

    IMAGE = "image"
    PDF = "pdf"


_DEFAULT_EXTENSIONS: Dict[FileCategory, FrozenSet[str]] = {
    FileCategory.IMAGE: ALLOWED_IMAGE_EXTENSIONS,
    FileCategory.PDF: ALLOWED_PDF_EXTENSIONS,
}

_ACCEPTED_KINDS: Dict[FileCategory, FrozenSet[FileKind]] = {
    FileCategory.IMAGE: frozenset({FileKind.JPG, FileKind.PNG, FileKind.GIF, FileKind.WEBP}),
    FileCategory.PDF: frozenset({FileKind.PDF}),
}


def file_extension(file_name: Optional[str]) -> str:
    """Lower-case extension of ``file_name`` without the dot; '' if none."""
    if not file_name:
        return ""
    return PurePosixPath(file_name.replace("\\", "/")).suffix.lstrip(".").lower()


def mime_type_for(extension: str) -> str:
    """MIME type for an extension (with or without a leading dot)."""
    return MIME_TYPES.get(extension.lstrip(".").lower(), DEFAULT_MIME_TYPE)


def extension_for_mime(content_type: Optional[str]) -> Optional[str]:
    """
    First known extension for a declared content type, ignoring parameters.

    >>> extension_for_mime("image/bmp")
    'bmp'
    """
    if not content_type:
        return None
    mime = content_type.split(";", 1)[0].strip().lower()
    for extension, known in MIME_TYPES.items():
        if known == mime:
            return extension
    return None


class FileTypeValidator:
    """
    Accepts or rejects an upload for a given FileCategory.

    Allow-lists default to the constants in ``app.core.constants`` and can
    be narrowed per endpoint, e.g. a PNG-only avatar upload:

        FileTypeValidator(allowed_extensions={FileCategory.IMAGE: {"png"}})
    """

    def __init__(
        self,
        allowed_extensions: Mapping[FileCategory, Iterable[str]] | None = None,
        sniffer: FileSignatureSniffer | None = None,
    ) -> None:
        self._extensions: Dict[FileCategory, FrozenSet[str]] = dict(_DEFAULT_EXTENSIONS)
        for category, extensions in (allowed_extensions or {}).items():
            self._extensions[FileCategory(category)] = frozenset(
                ext.lstrip(".").lower() for ext in extensions
            )
        self._sniffer: FileSignatureSniffer = sniffer or FileSignatureSniffer()

    # ── Public API ─────────────────────────────────────────────────────────────

    def allowed_extensions(self, category: FileCategory) -> FrozenSet[str]:
        return self._extensions[FileCategory(category)]

    def validate(
        self,
        file_name: Optional[str],
        data: bytes,
        category: FileCategory,
        kind: Optional[FileKind] = None,
    ) -> bool:
        """
        Return True when ``file_name`` and ``data`` both fit ``category``.

        Args:
            file_name : Name the upload will be stored under.
            data      : Raw file bytes.
            category  : Expected kind of upload.
            kind      : Already-sniffed FileKind of ``data``; sniffed here
                        when omitted.

        Returns:
            False for an empty name, empty bytes, a disallowed extension,
            or a signature outside the category (e.g. ``evil.pdf`` holding
            JPEG bytes).
        """
        category = FileCategory(category)
        if not file_name or not data:
            return False

        extension = file_extension(file_name)
        if extension not in self._extensions[category]:
            logger.debug("'%s' — extension '%s' not allowed for %s.", file_name, extension, category.value)
            return False

        if extension in UNSIGNED_EXTENSIONS:
            return True

        if kind is None:
            kind = self._sniffer.sniff(data)
        if kind not in _ACCEPTED_KINDS[category]:
            logger.debug("'%s' — signature '%s' does not match %s.", file_name, kind.value, category.value)
            return False

        return True

    def require_valid(
        self,
        file_name: Optional[str],
        data: bytes,
        category: FileCategory,
        kind: Optional[FileKind] = None,
    ) -> FileKind:
        """
        Like ``validate`` but raises on rejection.

        Returns:
            The sniffed FileKind of ``data``.

        Raises:
            UnsupportedFileFormatError: If the upload is rejected.
        """
        category = FileCategory(category)
        if kind is None:
            kind = self._sniffer.sniff(data)
        if not self.validate(file_name, data, category, kind=kind):
            allowed = ", ".join(sorted(ext.upper() for ext in self._extensions[category]))
            raise UnsupportedFileFormatError(
                f"Invalid {category.value} file '{file_name}'. Supported formats: {allowed}."
            )
        return kind
