"""
app/models/upload_models.py

Pydantic DTOs for the upload flow.
The request has no DTO — the body is decoded by app.multipart in the
controller; only the response shape is defined here.
"""

from typing import Optional

from pydantic import BaseModel


class UploadResponse(BaseModel):
    """
    Successful response for POST /upload/{owner_id}/photos and
    POST /upload/{owner_id}/documents.

        {
            "success": true,
            "message": "Photo uploaded successfully.",
            "owner_id": "twin-42",
            "file_name": "beach.png",
            "file_path": "photos/beach.png",
            "directory": "photos",
            "container": "twin-42",
            "url": "file:///data/uploads/twin-42/photos/beach.png?expires=...",
            "file_size": 20480,
            "mime_type": "image/png",
            "upload_date": "2026-10-18T09:30:00Z",
            "description": "Summer trip",
            "processing_time_seconds": 0.012
        }
    """

    success: bool = True
    message: str
    owner_id: str
    file_name: str
    file_path: str
    directory: str
    container: str
    url: str
    file_size: int
    mime_type: str
    upload_date: str
    description: Optional[str] = None
    processing_time_seconds: float
