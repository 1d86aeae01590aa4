"""
app/core/exceptions.py

Custom exception hierarchy for the application.

Raising typed exceptions from services lets controllers catch specific
cases and return the correct HTTP status code without leaking internals.
Truncated bodies and missing boundaries are not errors at the decoder
level: they come back as short or empty part lists.
"""


class AppBaseException(Exception):
    """Root exception — catch-all for any application-level error."""


# ── Multipart exceptions ───────────────────────────────────────────────────────

class InvalidBoundaryError(AppBaseException):
    """Raised when the request carries no usable multipart boundary."""


class MalformedPartError(AppBaseException):
    """Raised in strict mode when a part has no resolvable field name."""


class PayloadTooLargeError(AppBaseException):
    """Raised when a request body exceeds the configured upload limit."""


# ── Upload exceptions ──────────────────────────────────────────────────────────

class MissingFilePartError(AppBaseException):
    """Raised when none of the expected file fields is present or non-empty."""


class UnsupportedFileFormatError(AppBaseException):
    """Raised when an upload's extension or signature does not match its category."""


class InvalidUploadPathError(AppBaseException):
    """Raised when a client-chosen directory would leave the owner's container."""


# ── Storage exceptions ─────────────────────────────────────────────────────────

class StorageError(AppBaseException):
    """Raised when an interaction with the object store fails."""
