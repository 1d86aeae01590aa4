"""
app/multipart/part.py

Shared data-transfer objects produced by the multipart decoder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.core.constants import TEXT_CONTENT_TYPE_MARKERS, TEXT_CONTENT_TYPE_PREFIX


def is_text_content(content_type: Optional[str]) -> bool:
    """
    Return True when a part's declared content type should be read as text.

    Parts without a content type are plain form fields, so they default to
    text; anything explicitly binary does not.
    """
    if not content_type:
        return True
    lowered = content_type.lower()
    return lowered.startswith(TEXT_CONTENT_TYPE_PREFIX) or any(
        marker in lowered for marker in TEXT_CONTENT_TYPE_MARKERS
    )


@dataclass(frozen=True)
class PartHeaders:
    """
    Fields recovered from a single part's header block.

    Attributes:
        name         : Form field name from ``Content-Disposition``.
        file_name    : ``filename`` parameter, set only for file parts.
        content_type : Client-declared ``Content-Type`` (untrusted).
    """

    name: str
    file_name: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class Part:
    """
    One decoded unit of a multipart body: a form field or an uploaded file.

    Attributes:
        name         : Form field name. Not unique across a body; repeated
                       names keep their source order.
        file_name    : Original filename, only for file-bearing parts.
        content_type : Client-declared content type (untrusted).
        data         : Raw content bytes, possibly empty.
        string_value : UTF-8 text of ``data`` when the part is textual and
                       non-empty, otherwise None.
    """

    name: str
    data: bytes = b""
    file_name: Optional[str] = None
    content_type: Optional[str] = None
    string_value: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: PartHeaders, data: bytes) -> "Part":
        """Build a Part, decoding ``data`` to text when it looks textual."""
        text = None
        if data and is_text_content(headers.content_type):
            text = data.decode("utf-8", errors="replace")
        return cls(
            name=headers.name,
            data=data,
            file_name=headers.file_name,
            content_type=headers.content_type,
            string_value=text,
        )

    @property
    def is_file(self) -> bool:
        return self.file_name is not None

    @property
    def size(self) -> int:
        return len(self.data)
