"""
app/filetype/sniffer.py

Classifies a byte buffer by its magic-number prefix.

The result depends only on the bytes: the filename and the client's
declared content type are never consulted.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Tuple

from app.core.constants import (
    GIF_SIGNATURE,
    JPG_SIGNATURE,
    PDF_SIGNATURE,
    PNG_SIGNATURE,
    RIFF_SIGNATURE,
    WEBP_SIGNATURE,
    WEBP_SIGNATURE_OFFSET,
)


class FileKind(str, Enum):
    """Real file type as recognised from the bytes."""

    JPG = "jpg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"
    PDF = "pdf"
    UNKNOWN = "unknown"

    @property
    def extension(self) -> str:
        return self.value


def _is_webp(data: bytes) -> bool:
    tail = data[WEBP_SIGNATURE_OFFSET:WEBP_SIGNATURE_OFFSET + len(WEBP_SIGNATURE)]
    return data.startswith(RIFF_SIGNATURE) and tail == WEBP_SIGNATURE


# Evaluated in order; the first match wins.
_CHECKS: List[Tuple[FileKind, Callable[[bytes], bool]]] = [
    (FileKind.JPG, lambda data: data.startswith(JPG_SIGNATURE)),
    (FileKind.PNG, lambda data: data.startswith(PNG_SIGNATURE)),
    (FileKind.GIF, lambda data: data.startswith(GIF_SIGNATURE)),
    (FileKind.WEBP, _is_webp),
    (FileKind.PDF, lambda data: data.startswith(PDF_SIGNATURE)),
]


class FileSignatureSniffer:
    """Maps leading bytes to a FileKind."""

    def sniff(self, data: bytes) -> FileKind:
        """
        Return the FileKind whose signature ``data`` starts with.

        Unrecognised or empty input gives ``FileKind.UNKNOWN``; it is never
        guessed to be an image.
        """
        for kind, matches in _CHECKS:
            if matches(data):
                return kind
        return FileKind.UNKNOWN


def sniff(data: bytes) -> FileKind:
    """Module-level shortcut for ``FileSignatureSniffer().sniff``."""
    return FileSignatureSniffer().sniff(data)
