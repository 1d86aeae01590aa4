"""
app/services/upload_service.py

Orchestrates a single multipart upload:

    Content-Type + raw body
      └─ extract_boundary()                  header → boundary token
           └─ MultipartDecoder.decode()      bytes → [Part]
                └─ find_part()               [Part] → file part
                     └─ resolve_file_name()
                          └─ FileTypeValidator.require_valid()
                               └─ ObjectStorage.upload() + generate_url()

All three collaborators are constructor-injected so tests can swap them
out with mocks; the module-level singleton wires in the real ones.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from pathlib import PurePosixPath
from typing import List, Optional, Sequence

from app.core.config import settings
from app.core.constants import (
    DESCRIPTION_FIELD_NAMES,
    DOCUMENT_FIELD_NAMES,
    FILENAME_FIELD_NAMES,
    PHOTO_FIELD_NAMES,
)
from app.core.exceptions import (
    InvalidBoundaryError,
    InvalidUploadPathError,
    MissingFilePartError,
    PayloadTooLargeError,
)
from app.core.logger import get_logger
from app.filetype.sniffer import FileKind, FileSignatureSniffer
from app.filetype.validator import (
    FileCategory,
    FileTypeValidator,
    extension_for_mime,
    file_extension,
    mime_type_for,
)
from app.models.upload_models import UploadResponse
from app.multipart.boundary import extract_boundary, is_multipart
from app.multipart.decoder import MultipartDecoder
from app.multipart.fields import find_part, find_text
from app.multipart.part import Part
from app.storage.base import ObjectStorage
from app.storage.local_store import LocalObjectStorage

logger = get_logger(__name__)


def _quoted(names: Sequence[str]) -> str:
    quoted = [f"'{name}'" for name in names]
    if len(quoted) == 1:
        return quoted[0]
    if len(quoted) == 2:
        return f"{quoted[0]} or {quoted[1]}"
    return ", ".join(quoted[:-1]) + f", or {quoted[-1]}"


def clean_directory(directory: str) -> str:
    """
    Normalise a client-chosen folder to a relative path inside a container.

    Leading and trailing slashes are dropped and backslashes become slashes.

    Raises:
        InvalidUploadPathError: If any segment is ``..``.
    """
    segments = [s for s in directory.replace("\\", "/").split("/") if s and s != "."]
    if ".." in segments:
        raise InvalidUploadPathError(
            f"Invalid directory '{directory}': '..' segments are not allowed."
        )
    return "/".join(segments)


def resolve_file_name(
    parts: Sequence[Part],
    file_part: Part,
    kind: FileKind,
    prefix: str,
    owner_id: str,
    now: Optional[datetime] = None,
) -> str:
    """
    Pick the name an upload is stored under.

    Precedence: a ``filename``/``fileName`` form field, then the file
    part's own filename, then ``{prefix}_{owner_id}_{timestamp}.{ext}``.
    Directory components are stripped, and a name without a dot gets an
    extension appended: the sniffed one, else the one implied by the
    part's declared content type (formats without a signature, like BMP),
    else ``bin``.
    """
    if kind is not FileKind.UNKNOWN:
        extension = kind.extension
    else:
        extension = extension_for_mime(file_part.content_type) or "bin"

    name = find_text(parts, FILENAME_FIELD_NAMES) or file_part.file_name
    if name:
        name = PurePosixPath(name.replace("\\", "/")).name
    if not name:
        stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d_%H%M%S")
        name = f"{prefix}_{owner_id}_{stamp}.{extension}"

    if "." not in name:
        name = f"{name}.{extension}"
    return name


class UploadService:
    """
    Decodes, validates and stores one uploaded file per request.

    Design choices:
    - **Decode is lenient by default**: malformed parts are dropped and a
      truncated body yields whatever was decoded; the only hard failure is
      the expected file field being absent.
    - **Signature beats declaration**: the stored MIME type comes from the
      sniffed bytes, not the client's ``Content-Type``.
    """

    def __init__(
        self,
        decoder: MultipartDecoder | None = None,
        validator: FileTypeValidator | None = None,
        storage: ObjectStorage | None = None,
        sniffer: FileSignatureSniffer | None = None,
    ) -> None:
        self._decoder: MultipartDecoder = decoder or MultipartDecoder()
        self._sniffer: FileSignatureSniffer = sniffer or FileSignatureSniffer()
        self._validator: FileTypeValidator = validator or FileTypeValidator(sniffer=self._sniffer)
        self._storage: ObjectStorage = storage or LocalObjectStorage()

    # ── Public API ─────────────────────────────────────────────────────────────

    def parse_body(self, content_type: Optional[str], body: bytes) -> List[Part]:
        """
        Decode a raw multipart request body.

        Raises:
            InvalidBoundaryError: If the request is not multipart/form-data
                                  or declares no boundary.
            PayloadTooLargeError: If ``body`` exceeds ``settings.max_upload_bytes``.
        """
        if not is_multipart(content_type):
            raise InvalidBoundaryError("Content-Type must be multipart/form-data.")

        boundary = extract_boundary(content_type)
        if not boundary:
            raise InvalidBoundaryError("Invalid boundary in multipart/form-data.")

        if len(body) > settings.max_upload_bytes:
            raise PayloadTooLargeError(
                f"Request body of {len(body)} bytes exceeds the "
                f"{settings.max_upload_bytes}-byte limit."
            )

        parts = self._decoder.decode(body, boundary)
        logger.debug("Decoded %d part(s): %s", len(parts), [p.name for p in parts])
        return parts

    async def upload_photo(
        self,
        owner_id: str,
        content_type: Optional[str],
        body: bytes,
        directory: Optional[str] = None,
    ) -> UploadResponse:
        """
        Store an image sent under ``photo``, ``file`` or ``image``.

        Raises:
            InvalidBoundaryError, PayloadTooLargeError: From ``parse_body``.
            MissingFilePartError:       No non-empty image field.
            UnsupportedFileFormatError: Extension or signature is not an image.
            InvalidUploadPathError:     ``directory`` or ``owner_id`` leaves the container.
            StorageError:               The storage backend failed.
        """
        parts = self.parse_body(content_type, body)
        return self._store(
            owner_id,
            parts,
            field_names=PHOTO_FIELD_NAMES,
            category=FileCategory.IMAGE,
            directory=directory or "photos",
            prefix="photo",
            label="Photo",
        )

    async def upload_document(
        self,
        owner_id: str,
        content_type: Optional[str],
        body: bytes,
        directory: Optional[str] = None,
    ) -> UploadResponse:
        """
        Store a PDF sent under ``document``, ``file`` or ``pdf``.

        Raises the same exceptions as ``upload_photo``.
        """
        parts = self.parse_body(content_type, body)
        return self._store(
            owner_id,
            parts,
            field_names=DOCUMENT_FIELD_NAMES,
            category=FileCategory.PDF,
            directory=directory or "documents",
            prefix="document",
            label="Document",
        )

    # ── Internals ──────────────────────────────────────────────────────────────

    def _store(
        self,
        owner_id: str,
        parts: Sequence[Part],
        field_names: Sequence[str],
        category: FileCategory,
        directory: str,
        prefix: str,
        label: str,
    ) -> UploadResponse:
        started = time.perf_counter()

        file_part = find_part(parts, field_names)
        if file_part is None or not file_part.data:
            raise MissingFilePartError(
                f"No {label.lower()} file data found in request. "
                f"Expected field name: {_quoted(field_names)}."
            )

        directory = clean_directory(directory)
        kind = self._sniffer.sniff(file_part.data)
        file_name = resolve_file_name(parts, file_part, kind, prefix, owner_id)
        self._validator.require_valid(file_name, file_part.data, category, kind=kind)

        mime_type = mime_type_for(
            kind.extension if kind is not FileKind.UNKNOWN else file_extension(file_name)
        )
        container = owner_id.lower()
        if container in ("", ".", "..") or "/" in container or "\\" in container:
            raise InvalidUploadPathError(f"Invalid owner id '{owner_id}'.")

        logger.info(
            "%s upload — owner=%s  file=%s  size=%d  type=%s",
            label, owner_id, file_name, file_part.size, mime_type,
        )

        file_path = self._storage.upload(container, directory, file_name, file_part.data, mime_type)
        url = self._storage.generate_url(
            container, file_path, timedelta(hours=settings.url_expiry_hours)
        )

        return UploadResponse(
            message=f"{label} uploaded successfully.",
            owner_id=owner_id,
            file_name=file_name,
            file_path=file_path,
            directory=directory,
            container=container,
            url=url,
            file_size=file_part.size,
            mime_type=mime_type,
            upload_date=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            description=find_text(parts, DESCRIPTION_FIELD_NAMES),
            processing_time_seconds=round(time.perf_counter() - started, 6),
        )


# ── Module-level singleton ─────────────────────────────────────────────────────
# Controllers import this instance.  Tests construct UploadService directly
# with injected mocks.

upload_service = UploadService()
