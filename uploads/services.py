# src/uploads/services.py
import aiofiles
import logging
import mimetypes
import os
import time
from fastapi import HTTPException, UploadFile
from config import settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

# Accepted MIME families per upload kind.
ALLOWED_MIME_PREFIXES = {
    "profile": ("image/",),
    "post": ("image/", "video/", "audio/"),
    "story": ("image/", "video/", "audio/"),
    "video": ("video/",),
}


def media_type_for(mime_type: str) -> str:
    for family in ("image", "video", "audio"):
        if mime_type.startswith(f"{family}/"):
            return family
    return "unknown"


class MediaStorage:
    """Local-disk blob storage. Only the returned URL is ever stored on entities."""

    @staticmethod
    def directory_for(kind: str) -> str:
        return os.path.join(settings.UPLOAD_DIR, settings.UPLOAD_SUBDIRS[kind])

    @staticmethod
    def validate(kind: str, file: UploadFile) -> str:
        if kind not in ALLOWED_MIME_PREFIXES:
            raise HTTPException(status_code=404, detail=f"Unknown upload type '{kind}'")
        if not file or not file.filename:
            raise HTTPException(status_code=400, detail="No file uploaded")
        mime_type = file.content_type
        if not mime_type or mime_type == "application/octet-stream":
            mime_type, _ = mimetypes.guess_type(file.filename)
        if not mime_type or not mime_type.startswith(ALLOWED_MIME_PREFIXES[kind]):
            logger.warning(f"Rejected {kind} upload {file.filename!r} ({mime_type})")
            raise HTTPException(status_code=400, detail=f"File type not accepted for {kind} uploads")
        return mime_type

    @staticmethod
    async def save(kind: str, file: UploadFile, user_id: int) -> dict:
        """Persist an upload and return its public URL and media type."""
        mime_type = MediaStorage.validate(kind, file)
        directory = MediaStorage.directory_for(kind)
        os.makedirs(directory, exist_ok=True)

        _, ext = os.path.splitext(file.filename)
        filename = f"{user_id}-{int(time.time() * 1000)}{ext.lower()}"
        path = os.path.join(directory, filename)

        written = 0
        try:
            async with aiofiles.open(path, "wb") as out:
                while chunk := await file.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > settings.MAX_UPLOAD_SIZE:
                        raise HTTPException(status_code=413, detail="File exceeds the 50MB upload limit")
                    await out.write(chunk)
        except HTTPException:
            if os.path.exists(path):
                os.remove(path)
            raise

        logger.info(f"Stored {kind} upload for user {user_id} at {path} ({written} bytes)")
        return {
            "file_url": f"{settings.MEDIA_URL_PREFIX}/{settings.UPLOAD_SUBDIRS[kind]}/{filename}",
            "media_type": media_type_for(mime_type),
        }
