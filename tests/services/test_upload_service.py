"""
tests/services/test_upload_service.py

Unit tests for UploadService.

The storage backend is replaced with a MagicMock so these tests are fast,
deterministic, and have zero external I/O. The decoder and validator are
the real ones: they are pure and cheap.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from app.core.exceptions import (
    InvalidBoundaryError,
    InvalidUploadPathError,
    MissingFilePartError,
    PayloadTooLargeError,
    StorageError,
    UnsupportedFileFormatError,
)
from app.filetype.sniffer import FileKind, FileSignatureSniffer
from app.models.upload_models import UploadResponse
from app.multipart.part import Part
from app.services.upload_service import (
    UploadService,
    _quoted,
    clean_directory,
    resolve_file_name,
)

CONTENT_TYPE = "multipart/form-data; boundary=B"


# ── Fixtures & helpers ─────────────────────────────────────────────────────────

def _make_service(sniffer: FileSignatureSniffer | None = None) -> UploadService:
    storage = MagicMock()
    storage.upload.side_effect = (
        lambda container, directory, file_name, data, content_type: f"{directory}/{file_name}"
    )
    storage.generate_url.return_value = "https://storage.example/signed"
    return UploadService(storage=storage, sniffer=sniffer)


# ── parse_body tests ───────────────────────────────────────────────────────────

class TestParseBody:

    def test_decodes_parts(self, multipart) -> None:
        body = multipart([("a", None, None, b"1")], "B")

        parts = _make_service().parse_body(CONTENT_TYPE, body)

        assert [p.name for p in parts] == ["a"]

    def test_non_multipart_raises(self) -> None:
        with pytest.raises(InvalidBoundaryError, match="multipart/form-data"):
            _make_service().parse_body("application/json", b"{}")

    def test_missing_boundary_raises(self) -> None:
        with pytest.raises(InvalidBoundaryError, match="boundary"):
            _make_service().parse_body("multipart/form-data", b"--B--")

    def test_oversize_body_raises(self, multipart) -> None:
        body = multipart([("a", None, None, b"x" * 64)], "B")

        with patch("app.services.upload_service.settings.max_upload_bytes", 16):
            with pytest.raises(PayloadTooLargeError):
                _make_service().parse_body(CONTENT_TYPE, body)


# ── upload_photo tests ─────────────────────────────────────────────────────────

class TestUploadPhoto:

    @pytest.mark.asyncio
    async def test_happy_path(self, multipart, png_bytes) -> None:
        service = _make_service()
        body = multipart(
            [
                ("description", None, None, b"Summer trip"),
                ("photo", "beach.png", "image/png", png_bytes),
            ],
            "B",
        )

        result = await service.upload_photo("Twin-42", CONTENT_TYPE, body)

        assert isinstance(result, UploadResponse)
        assert result.success is True
        assert result.file_name == "beach.png"
        assert result.file_path == "photos/beach.png"
        assert result.container == "twin-42"
        assert result.directory == "photos"
        assert result.mime_type == "image/png"
        assert result.file_size == len(png_bytes)
        assert result.description == "Summer trip"
        assert result.url == "https://storage.example/signed"
        service._storage.upload.assert_called_once_with(
            "twin-42", "photos", "beach.png", png_bytes, "image/png"
        )

    @pytest.mark.asyncio
    async def test_image_field_alias(self, multipart, gif_bytes) -> None:
        body = multipart([("image", "anim.gif", "image/gif", gif_bytes)], "B")

        result = await _make_service().upload_photo("o", CONTENT_TYPE, body)

        assert result.mime_type == "image/gif"

    @pytest.mark.asyncio
    async def test_filename_field_overrides_part_name(self, multipart, jpeg_bytes) -> None:
        body = multipart(
            [
                ("file", "IMG_0001.jpg", "image/jpeg", jpeg_bytes),
                ("fileName", None, None, b"  renamed.jpg "),
            ],
            "B",
        )

        result = await _make_service().upload_photo("o", CONTENT_TYPE, body)

        assert result.file_name == "renamed.jpg"

    @pytest.mark.asyncio
    async def test_custom_directory(self, multipart, png_bytes) -> None:
        body = multipart([("photo", "a.png", "image/png", png_bytes)], "B")

        result = await _make_service().upload_photo("o", CONTENT_TYPE, body, directory="/albums/2026/")

        assert result.directory == "albums/2026"
        assert result.file_path == "albums/2026/a.png"

    @pytest.mark.asyncio
    async def test_mime_type_comes_from_bytes_not_declaration(self, multipart, png_bytes) -> None:
        body = multipart([("photo", "a.jpg", "image/jpeg", png_bytes)], "B")

        result = await _make_service().upload_photo("o", CONTENT_TYPE, body)

        assert result.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_missing_file_part_raises(self, multipart) -> None:
        body = multipart([("description", None, None, b"no file")], "B")

        with pytest.raises(MissingFilePartError, match="'photo', 'file', or 'image'"):
            await _make_service().upload_photo("o", CONTENT_TYPE, body)

    @pytest.mark.asyncio
    async def test_empty_file_part_raises(self, multipart) -> None:
        body = multipart([("photo", "a.png", "image/png", b"")], "B")

        with pytest.raises(MissingFilePartError):
            await _make_service().upload_photo("o", CONTENT_TYPE, body)

    @pytest.mark.asyncio
    async def test_no_boundary_in_body_is_missing_file(self) -> None:
        with pytest.raises(MissingFilePartError):
            await _make_service().upload_photo("o", CONTENT_TYPE, b"garbage without markers")

    @pytest.mark.asyncio
    async def test_pdf_bytes_as_photo_rejected(self, multipart, pdf_bytes) -> None:
        service = _make_service()
        body = multipart([("photo", "a.png", "image/png", pdf_bytes)], "B")

        with pytest.raises(UnsupportedFileFormatError):
            await service.upload_photo("o", CONTENT_TYPE, body)

        service._storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_storage_error_propagates(self, multipart, png_bytes) -> None:
        service = _make_service()
        service._storage.upload.side_effect = StorageError("disk full")
        body = multipart([("photo", "a.png", "image/png", png_bytes)], "B")

        with pytest.raises(StorageError, match="disk full"):
            await service.upload_photo("o", CONTENT_TYPE, body)


# ── upload_document tests ──────────────────────────────────────────────────────

class TestUploadDocument:

    @pytest.mark.asyncio
    async def test_happy_path(self, multipart, pdf_bytes) -> None:
        body = multipart([("document", "contract.pdf", "application/pdf", pdf_bytes)], "B")

        result = await _make_service().upload_document("o", CONTENT_TYPE, body)

        assert result.file_path == "documents/contract.pdf"
        assert result.mime_type == "application/pdf"
        assert result.message == "Document uploaded successfully."

    @pytest.mark.asyncio
    async def test_jpeg_disguised_as_pdf_rejected(self, multipart, jpeg_bytes) -> None:
        body = multipart([("pdf", "evil.pdf", "application/pdf", jpeg_bytes)], "B")

        with pytest.raises(UnsupportedFileFormatError):
            await _make_service().upload_document("o", CONTENT_TYPE, body)

    @pytest.mark.asyncio
    async def test_photo_field_is_not_a_document_field(self, multipart, pdf_bytes) -> None:
        body = multipart([("photo", "a.pdf", "application/pdf", pdf_bytes)], "B")

        with pytest.raises(MissingFilePartError, match="'document', 'file', or 'pdf'"):
            await _make_service().upload_document("o", CONTENT_TYPE, body)


# ── resolve_file_name tests ────────────────────────────────────────────────────

class TestResolveFileName:

    NOW = datetime(2026, 10, 18, 9, 30, 5, tzinfo=timezone.utc)

    def test_generated_name_uses_sniffed_extension(self) -> None:
        part = Part(name="photo", data=b"\x89PNG")

        name = resolve_file_name([part], part, FileKind.PNG, "photo", "o1", now=self.NOW)

        assert name == "photo_o1_20261018_093005.png"

    def test_name_without_dot_gets_extension(self) -> None:
        part = Part(name="photo", data=b"\xff\xd8\xff", file_name="blob")

        assert resolve_file_name([part], part, FileKind.JPG, "photo", "o1") == "blob.jpg"

    def test_directory_components_are_stripped(self) -> None:
        part = Part(name="file", data=b"%PDF", file_name="..\\..\\secret\\x.pdf")

        assert resolve_file_name([part], part, FileKind.PDF, "document", "o1") == "x.pdf"

    def test_unknown_kind_falls_back_to_bin(self) -> None:
        part = Part(name="photo", data=b"????")

        name = resolve_file_name([part], part, FileKind.UNKNOWN, "photo", "o1", now=self.NOW)

        assert name.endswith(".bin")

    def test_unknown_bytes_take_extension_from_declared_type(self) -> None:
        part = Part(name="photo", data=b"BM\x36\x00", content_type="image/bmp")

        name = resolve_file_name([part], part, FileKind.UNKNOWN, "photo", "o1", now=self.NOW)

        assert name == "photo_o1_20261018_093005.bmp"

    def test_override_without_dot_takes_declared_extension(self) -> None:
        part = Part(name="photo", data=b"BM\x36\x00", content_type="image/bmp")
        override = Part(name="filename", data=b"scan", string_value="scan")

        assert resolve_file_name([part, override], part, FileKind.UNKNOWN, "photo", "o1") == "scan.bmp"


# ── Storage path checks ────────────────────────────────────────────────────────

class TestUploadPaths:

    @pytest.mark.parametrize(
        "directory, expected",
        [
            ("photos", "photos"),
            ("/albums/2026/", "albums/2026"),
            ("albums\\2026", "albums/2026"),
            ("./albums//x", "albums/x"),
        ],
    )
    def test_clean_directory(self, directory: str, expected: str) -> None:
        assert clean_directory(directory) == expected

    @pytest.mark.parametrize("directory", ["../escape", "a/../../b", "..", "a\\..\\b"])
    def test_parent_segments_are_rejected(self, directory: str) -> None:
        with pytest.raises(InvalidUploadPathError):
            clean_directory(directory)

    @pytest.mark.asyncio
    async def test_escaping_directory_never_reaches_storage(self, multipart, png_bytes) -> None:
        service = _make_service()
        body = multipart([("photo", "a.png", "image/png", png_bytes)], "B")

        with pytest.raises(InvalidUploadPathError):
            await service.upload_photo("o", CONTENT_TYPE, body, directory="../escape")

        service._storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_dot_dot_owner_is_rejected(self, multipart, png_bytes) -> None:
        service = _make_service()
        body = multipart([("photo", "a.png", "image/png", png_bytes)], "B")

        with pytest.raises(InvalidUploadPathError):
            await service.upload_photo("..", CONTENT_TYPE, body)

        service._storage.upload.assert_not_called()


# ── Misc ───────────────────────────────────────────────────────────────────────

class TestUploadDetails:

    @pytest.mark.asyncio
    async def test_bytes_are_sniffed_once_per_upload(self, multipart, png_bytes) -> None:
        sniffer = MagicMock(wraps=FileSignatureSniffer())
        body = multipart([("photo", "a.png", "image/png", png_bytes)], "B")

        await _make_service(sniffer=sniffer).upload_photo("o", CONTENT_TYPE, body)

        assert sniffer.sniff.call_count == 1

    @pytest.mark.asyncio
    async def test_bmp_without_filename_is_stored_as_bmp(self, multipart) -> None:
        body = multipart([("photo", "", "image/bmp", b"BM\x36\x00\x00\x00")], "B")

        result = await _make_service().upload_photo("o", CONTENT_TYPE, body)

        assert result.file_name.endswith(".bmp")
        assert result.mime_type == "image/bmp"

    @pytest.mark.parametrize(
        "names, expected",
        [
            (("photo",), "'photo'"),
            (("filename", "fileName"), "'filename' or 'fileName'"),
            (("photo", "file", "image"), "'photo', 'file', or 'image'"),
        ],
    )
    def test_quoted_field_names(self, names, expected) -> None:
        assert _quoted(names) == expected
