"""
app/multipart/headers.py

Parses the header block of a single multipart part.

Only the two headers browsers and HTTP clients actually send are read:

    Content-Disposition: form-data; name="file"; filename="a.png"
    Content-Type: image/png

Anything else in the block is ignored.
"""

from __future__ import annotations

import re
from typing import Optional

from app.core.logger import get_logger
from app.multipart.part import PartHeaders

logger = get_logger(__name__)

_DISPOSITION_PREFIX = "content-disposition:"
_CONTENT_TYPE_PREFIX = "content-type:"

# The lookbehind keeps ``name=`` from matching the tail of ``filename=``.
_NAME_RE = re.compile(r'(?<![\w*-])name="([^"]+)"', re.IGNORECASE)
_FILENAME_RE = re.compile(r'(?<![\w*-])filename="([^"]+)"', re.IGNORECASE)


class PartHeaderParser:
    """Extracts ``name``, ``file_name`` and ``content_type`` from a header block."""

    def parse(self, header_text: str) -> Optional[PartHeaders]:
        """
        Parse one part's headers.

        Args:
            header_text : Text between a boundary line and the blank line
                          that starts the part content.

        Returns:
            PartHeaders, or None when no field name could be found. None is
            a skip signal for the caller, not an error.
        """
        name: Optional[str] = None
        file_name: Optional[str] = None
        content_type: Optional[str] = None

        for raw_line in header_text.split("\n"):
            line = raw_line.strip()
            lowered = line.lower()

            if lowered.startswith(_DISPOSITION_PREFIX):
                name_match = _NAME_RE.search(line)
                if name_match:
                    name = name_match.group(1)
                filename_match = _FILENAME_RE.search(line)
                if filename_match:
                    file_name = filename_match.group(1)

            elif lowered.startswith(_CONTENT_TYPE_PREFIX):
                content_type = line[len(_CONTENT_TYPE_PREFIX):].strip() or None

        if not name:
            logger.debug("Part header block has no field name: %r", header_text[:200])
            return None

        return PartHeaders(name=name, file_name=file_name, content_type=content_type)
