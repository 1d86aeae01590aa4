"""
tests/conftest.py

Shared pytest fixtures available to all test modules.

Fixtures defined here are auto-discovered by pytest — no import needed.
"""

from typing import Callable, Optional, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient

from app.main import app

#: (name, file_name, content_type, data)
PartSpec = Tuple[str, Optional[str], Optional[str], bytes]


# ── Core client fixture ────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    A synchronous TestClient wrapping the FastAPI app.

    session-scoped so the app is instantiated once per test run.
    """
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


# ── Multipart body builder ─────────────────────────────────────────────────────

def encode_multipart(parts: Sequence[PartSpec], boundary: str, terminate: bool = True) -> bytes:
    """
    Encode parts the way browsers do: CRLF line endings, quoted parameters,
    and a terminal ``--boundary--`` line unless ``terminate`` is False.
    """
    chunks = []
    for name, file_name, content_type, data in parts:
        disposition = f'Content-Disposition: form-data; name="{name}"'
        if file_name is not None:
            disposition += f'; filename="{file_name}"'
        headers = [disposition]
        if content_type is not None:
            headers.append(f"Content-Type: {content_type}")
        chunks.append(
            f"--{boundary}\r\n".encode()
            + "\r\n".join(headers).encode()
            + b"\r\n\r\n"
            + data
            + b"\r\n"
        )
    body = b"".join(chunks)
    if terminate:
        body += f"--{boundary}--\r\n".encode()
    return body


@pytest.fixture
def multipart() -> Callable[..., bytes]:
    """
    Return the body encoder.

    Usage:
        body = multipart([("description", None, None, b"hello")], "B")
    """
    return encode_multipart


# ── Sample file fixtures ───────────────────────────────────────────────────────

@pytest.fixture
def png_bytes() -> bytes:
    """PNG signature followed by an IHDR-ish tail."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + bytes(range(32))


@pytest.fixture
def jpeg_bytes() -> bytes:
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32


@pytest.fixture
def gif_bytes() -> bytes:
    return b"GIF89a" + b"\x01\x00\x01\x00" + b"\x00" * 16


@pytest.fixture
def webp_bytes() -> bytes:
    return b"RIFF" + b"\x24\x00\x00\x00" + b"WEBPVP8 " + b"\x00" * 16


@pytest.fixture
def pdf_bytes() -> bytes:
    """
    Minimal PDF header bytes.
    Enough for signature validation; not a renderable document.
    """
    return b"%PDF-1.4\n%%EOF"
