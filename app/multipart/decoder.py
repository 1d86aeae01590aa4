"""
app/multipart/decoder.py

Hand-rolled multipart/form-data decoder.

Single responsibility: take a fully-buffered request body and its boundary
token and produce the ordered list of Parts it contains. No framework
multipart parser is involved and nothing here touches the network or disk.

Body layout handled:

    --B\r\n
    Content-Disposition: form-data; name="description"\r\n
    \r\n
    hello\r\n
    --B\r\n
    Content-Disposition: form-data; name="file"; filename="a.png"\r\n
    Content-Type: image/png\r\n
    \r\n
    <bytes>\r\n
    --B--\r\n

Decoding walks  ExpectBoundary → ExpectHeaders → ExpectContent  and loops
back to ExpectHeaders until the terminal boundary (``--B--``) or a failed
scan ends it.
"""

from __future__ import annotations

from typing import List

from app.core.config import settings
from app.core.constants import CRLF, HEADER_SEPARATOR, TERMINAL_SUFFIX
from app.core.exceptions import InvalidBoundaryError, MalformedPartError
from app.core.logger import get_logger
from app.multipart.headers import PartHeaderParser
from app.multipart.part import Part
from app.multipart.scanner import NOT_FOUND, BoundaryScanner

logger = get_logger(__name__)


class MultipartDecoder:
    """
    Turns ``(body, boundary)`` into an ordered list of Part objects.

    Failure policy:
    - **No boundary in the body**: returns ``[]``.
    - **Truncated body** (missing header separator or next boundary):
      returns the parts decoded before the cut, never raises.
    - **Nameless part**: dropped in lenient mode; ``MalformedPartError``
      in strict mode.

    The decoder holds no per-call state, so one instance can be shared
    across requests.
    """

    def __init__(
        self,
        strict: bool | None = None,
        scanner: BoundaryScanner | None = None,
        header_parser: PartHeaderParser | None = None,
    ) -> None:
        """
        Args:
            strict        : Raise on nameless parts instead of dropping them.
                            Defaults to ``settings.multipart_strict``.
            scanner       : Byte-pattern search; defaults to BoundaryScanner().
            header_parser : Part header parser; defaults to PartHeaderParser().
        """
        self.strict: bool = settings.multipart_strict if strict is None else strict
        self._scanner: BoundaryScanner = scanner or BoundaryScanner()
        self._header_parser: PartHeaderParser = header_parser or PartHeaderParser()

    # ── Public API ─────────────────────────────────────────────────────────────

    def decode(self, body: bytes, boundary: str) -> List[Part]:
        """
        Decode a multipart/form-data body.

        Args:
            body     : The complete raw request body.
            boundary : Boundary token from the Content-Type header, quotes
                       already stripped.

        Returns:
            Parts in source order. Empty when the body contains no
            boundary marker at all.

        Raises:
            InvalidBoundaryError: If ``boundary`` is empty.
            MalformedPartError:   In strict mode, for a part without a name.
        """
        if not boundary:
            raise InvalidBoundaryError("Multipart boundary must not be empty.")

        data = bytes(body)
        marker = b"--" + boundary.encode("utf-8")
        parts: List[Part] = []

        # ExpectBoundary
        first = self._scanner.find(data, 0, marker)
        if first == NOT_FOUND:
            logger.debug("No boundary marker in %d-byte body.", len(data))
            return parts

        position = first + len(marker)
        if self._is_terminal(data, position):
            return parts

        while position < len(data):
            # ExpectHeaders
            if data[position:position + 2] == CRLF:
                position += 2

            headers_end = self._scanner.find(data, position, HEADER_SEPARATOR)
            if headers_end == NOT_FOUND:
                logger.warning(
                    "Multipart body truncated inside part headers — kept %d part(s).",
                    len(parts),
                )
                break

            header_text = data[position:headers_end].decode("utf-8", errors="replace")
            headers = self._header_parser.parse(header_text)
            position = headers_end + len(HEADER_SEPARATOR)

            # ExpectContent
            next_boundary = self._scanner.find(data, position, marker)
            if next_boundary == NOT_FOUND:
                logger.warning(
                    "Multipart body truncated inside part content — kept %d part(s).",
                    len(parts),
                )
                break

            # The CRLF before the next marker belongs to the framing, not the content.
            content_length = next_boundary - position - 2
            content = data[position:position + content_length] if content_length > 0 else b""

            if headers is not None:
                parts.append(Part.from_headers(headers, content))
            elif self.strict:
                raise MalformedPartError(
                    f"Multipart part at byte {position} has no field name."
                )
            else:
                logger.debug("Dropping nameless part at byte %d.", position)

            position = next_boundary + len(marker)
            if self._is_terminal(data, position):
                break

        logger.debug("Decoded %d part(s) from %d-byte body.", len(parts), len(data))
        return parts

    # ── Internals ──────────────────────────────────────────────────────────────

    @staticmethod
    def _is_terminal(data: bytes, position: int) -> bool:
        """True when the marker ending just before ``position`` closes the body."""
        return data[position:position + len(TERMINAL_SUFFIX)] == TERMINAL_SUFFIX


def decode(body: bytes, boundary: str) -> List[Part]:
    """Decode ``body`` with a default (settings-driven) MultipartDecoder."""
    return MultipartDecoder().decode(body, boundary)
