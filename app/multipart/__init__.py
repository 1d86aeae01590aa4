"""app/multipart/__init__.py — public API of the multipart package."""

from app.multipart.boundary import extract_boundary, is_multipart
from app.multipart.decoder import MultipartDecoder, decode
from app.multipart.fields import find_part, find_text
from app.multipart.headers import PartHeaderParser
from app.multipart.part import Part, PartHeaders
from app.multipart.scanner import NOT_FOUND, BoundaryScanner

__all__ = [
    "BoundaryScanner",
    "MultipartDecoder",
    "NOT_FOUND",
    "Part",
    "PartHeaderParser",
    "PartHeaders",
    "decode",
    "extract_boundary",
    "find_part",
    "find_text",
    "is_multipart",
]
