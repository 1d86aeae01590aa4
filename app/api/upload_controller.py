"""
app/api/upload_controller.py

Handles incoming requests to POST /upload/{owner_id}/photos and
POST /upload/{owner_id}/documents.

This layer is responsible only for HTTP concerns:
  - Rejecting bodies over the upload limit before reading them, when the
    client declares a Content-Length.
  - Reading the raw body and handing it, with the Content-Type header,
    to UploadService. The framework's own form parser is never used.
  - Translating service-level errors into appropriate HTTP responses.

Responses:
  200  Upload stored.  Body is an UploadResponse.
  400  The request was rejected before storage — for example, it was not
       multipart/form-data, carried no boundary, had no file field, or the
       file's extension and signature did not match the expected type,
       or the target directory tried to leave the owner's container.
  413  The request body exceeds the configured upload limit.
  500  The storage backend failed or an unexpected error occurred.
"""

from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import (
    AppBaseException,
    InvalidBoundaryError,
    InvalidUploadPathError,
    MalformedPartError,
    MissingFilePartError,
    PayloadTooLargeError,
    StorageError,
    UnsupportedFileFormatError,
)
from app.core.logger import get_logger
from app.models.upload_models import UploadResponse
from app.services.upload_service import upload_service

logger = get_logger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])

UploadCall = Callable[[str, Optional[str], bytes, Optional[str]], Awaitable[UploadResponse]]

# ── Helpers ────────────────────────────────────────────────────────────────────

def _err(message: str, status: int = 400) -> JSONResponse:
    """Return a JSON error response with the standard error shape."""
    return JSONResponse(status_code=status, content={"error": message})


def _declared_length(request: Request) -> int:
    try:
        return int(request.headers.get("content-length", 0))
    except ValueError:
        return 0


async def _handle(
    request: Request,
    owner_id: str,
    directory: Optional[str],
    upload: UploadCall,
    label: str,
) -> JSONResponse:
    """Shared request flow for both upload endpoints."""
    # ── 1. Cheap size guard ────────────────────────────────────────────────────
    if _declared_length(request) > settings.max_upload_bytes:
        return _err(
            f"File too large (max {settings.max_upload_bytes // (1024 * 1024)}MB).",
            status=413,
        )

    # ── 2. Read the raw body ───────────────────────────────────────────────────
    body = await request.body()
    content_type = request.headers.get("content-type")

    logger.info(
        "%s upload request received — owner=%s  %d byte(s)", label, owner_id, len(body)
    )

    # ── 3. Delegate to service ─────────────────────────────────────────────────
    try:
        result = await upload(owner_id, content_type, body, directory)

    except PayloadTooLargeError as exc:
        logger.warning("Oversize upload rejected: %s", exc)
        return _err(str(exc), status=413)

    except (InvalidBoundaryError, MalformedPartError, MissingFilePartError) as exc:
        logger.warning("Malformed upload rejected: %s", exc)
        return _err(str(exc))

    except UnsupportedFileFormatError as exc:
        logger.warning("Unsupported file rejected: %s", exc)
        return _err(str(exc))

    except InvalidUploadPathError as exc:
        logger.warning("Upload path rejected: %s", exc)
        return _err(str(exc))

    except StorageError as exc:
        logger.exception("Storage error during %s upload: %s", label.lower(), exc)
        return _err(f"Failed to upload {label.lower()} to storage.", status=500)

    except AppBaseException as exc:
        logger.exception("Upload pipeline error: %s", exc)
        return _err(f"Failed to process uploaded {label.lower()}.", status=500)

    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during %s upload: %s", label.lower(), exc)
        return _err(f"Failed to process uploaded {label.lower()}.", status=500)

    logger.info("%s upload complete — %s", label, result.file_path)
    return JSONResponse(status_code=200, content=result.model_dump())


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post(
    "/{owner_id}/photos",
    response_model=UploadResponse,
    summary="Upload a photo",
)
async def upload_photo(
    owner_id: str,
    request: Request,
    directory: Optional[str] = Query(default=None, description="Folder inside the owner's container."),
) -> JSONResponse:
    """
    Accepts multipart/form-data with:

      photo | file | image   (required) — the image file (JPG, PNG, GIF, WEBP, BMP).
      filename | fileName    (optional) — name to store the file under.
      description            (optional) — free-text note echoed in the response.
    """
    return await _handle(request, owner_id, directory, upload_service.upload_photo, "Photo")


@router.post(
    "/{owner_id}/documents",
    response_model=UploadResponse,
    summary="Upload a PDF document",
)
async def upload_document(
    owner_id: str,
    request: Request,
    directory: Optional[str] = Query(default=None, description="Folder inside the owner's container."),
) -> JSONResponse:
    """
    Accepts multipart/form-data with:

      document | file | pdf  (required) — the PDF file.
      filename | fileName    (optional) — name to store the file under.
      description            (optional) — free-text note echoed in the response.
    """
    return await _handle(request, owner_id, directory, upload_service.upload_document, "Document")
