"""
app/multipart/fields.py

Lookup helpers for picking conventional fields out of a decoded body.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from app.multipart.part import Part


def find_part(parts: Sequence[Part], names: Iterable[str]) -> Optional[Part]:
    """
    Return the first part (in body order) whose name is one of ``names``.

    Body order wins over the order of ``names``: with names
    ``("photo", "file")`` and a body holding ``file`` then ``photo``,
    the ``file`` part is returned.
    """
    wanted = set(names)
    for part in parts:
        if part.name in wanted:
            return part
    return None


def find_text(parts: Sequence[Part], names: Iterable[str]) -> Optional[str]:
    """
    Return the stripped text of the first matching part.

    File uploads, binary parts, empty parts and whitespace-only values
    all give None, so a text file sent under ``filename`` cannot rename
    the upload.
    """
    part = find_part(parts, names)
    if part is None or part.is_file or part.string_value is None:
        return None
    return part.string_value.strip() or None
