"""
app/multipart/scanner.py

Exact byte-pattern search over an in-memory buffer.
"""

from __future__ import annotations

#: Returned by ``BoundaryScanner.find`` when the pattern does not occur.
NOT_FOUND: int = -1


class BoundaryScanner:
    """
    Locates boundary markers and header separators inside a request body.

    Matching is plain byte equality with no quoting or escaping rules.
    ``bytes.find`` does the scanning, which keeps request-sized bodies
    (tens of MB) well within budget.
    """

    def find(self, haystack: bytes, start: int, pattern: bytes) -> int:
        """
        Return the first index ``i >= start`` where ``pattern`` occurs.

        Args:
            haystack : Buffer to search.
            start    : First index to consider. Negative values mean 0.
            pattern  : Bytes to match exactly.

        Returns:
            The match index, or ``NOT_FOUND`` when there is none.

        Raises:
            ValueError: If ``pattern`` is empty.
        """
        if not pattern:
            raise ValueError("pattern must not be empty.")
        if start < 0:
            start = 0
        if start > len(haystack) - len(pattern):
            return NOT_FOUND
        return haystack.find(pattern, start)
