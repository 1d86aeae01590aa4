"""
app/core/constants.py

Application-wide fixed constants.

These are business rules that are part of the system's contract and are
NOT configurable via environment variables.
"""

from typing import Dict, FrozenSet, Tuple

# ── Multipart framing ──────────────────────────────────────────────────────────

CRLF: bytes = b"\r\n"

#: Separates a part's header block from its content.
HEADER_SEPARATOR: bytes = b"\r\n\r\n"

#: Follows the last boundary marker of a body.
TERMINAL_SUFFIX: bytes = b"--"

# ── Conventional form field names ──────────────────────────────────────────────

PHOTO_FIELD_NAMES: Tuple[str, ...] = ("photo", "file", "image")
DOCUMENT_FIELD_NAMES: Tuple[str, ...] = ("document", "file", "pdf")
FILENAME_FIELD_NAMES: Tuple[str, ...] = ("filename", "fileName")
DESCRIPTION_FIELD_NAMES: Tuple[str, ...] = ("description",)

# ── Magic numbers ──────────────────────────────────────────────────────────────

JPG_SIGNATURE: bytes = b"\xff\xd8\xff"
PNG_SIGNATURE: bytes = b"\x89PNG"
GIF_SIGNATURE: bytes = b"GIF"
RIFF_SIGNATURE: bytes = b"RIFF"
WEBP_SIGNATURE: bytes = b"WEBP"
WEBP_SIGNATURE_OFFSET: int = 8
PDF_SIGNATURE: bytes = b"%PDF"

# ── Allowed file types ─────────────────────────────────────────────────────────

#: Extensions (no leading dot, lower-case) accepted for image uploads.
#: ``bmp`` has no signature check and is accepted on extension alone.
ALLOWED_IMAGE_EXTENSIONS: FrozenSet[str] = frozenset(
    {"jpg", "jpeg", "png", "gif", "webp", "bmp"}
)

#: Extensions accepted for document uploads.
ALLOWED_PDF_EXTENSIONS: FrozenSet[str] = frozenset({"pdf"})

#: Extensions that skip the signature check.
UNSIGNED_EXTENSIONS: FrozenSet[str] = frozenset({"bmp"})

# ── MIME types ─────────────────────────────────────────────────────────────────

MIME_TYPES: Dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
    "tif": "image/tiff",
    "pdf": "application/pdf",
}

DEFAULT_MIME_TYPE: str = "application/octet-stream"

#: Declared content types whose bytes are decoded into ``Part.string_value``.
TEXT_CONTENT_TYPE_PREFIX: str = "text/"
TEXT_CONTENT_TYPE_MARKERS: Tuple[str, ...] = (
    "application/x-www-form-urlencoded",
    "application/json",
)
