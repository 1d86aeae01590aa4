"""
app/multipart/boundary.py

Pulls the boundary token out of a request's ``Content-Type`` header.
"""

from __future__ import annotations

from typing import Optional

MULTIPART_FORM_DATA = "multipart/form-data"


def is_multipart(content_type: Optional[str]) -> bool:
    """Return True when the header declares ``multipart/form-data``."""
    return bool(content_type) and MULTIPART_FORM_DATA in content_type.lower()


def extract_boundary(content_type: Optional[str]) -> Optional[str]:
    """
    Return the boundary parameter of a ``Content-Type`` value.

    >>> extract_boundary('multipart/form-data; boundary="abc"')
    'abc'

    Surrounding quotes are stripped and the parameter name is matched
    case-insensitively. Returns None when the header is missing or carries
    no non-empty boundary.
    """
    if not content_type:
        return None

    for param in content_type.split(";"):
        key, sep, value = param.strip().partition("=")
        if sep and key.strip().lower() == "boundary":
            token = value.strip().strip('"')
            return token or None

    return None
