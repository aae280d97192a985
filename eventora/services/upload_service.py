"""Storage of event images uploaded through the API."""
import os
import random
import time
from fastapi import HTTPException, UploadFile
from eventora.core.config import settings
from eventora.core.logging import logger

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}
EVENT_IMAGE_SUBDIR = "events"


def _unique_filename(content_type: str) -> str:
    # Suffix follows the validated content type, never the client filename
    ext = IMAGE_EXTENSIONS[content_type]
    return f"event-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


async def save_event_image(upload: UploadFile) -> dict:
    """
    Validate and persist an uploaded event image under UPLOAD_DIR/events.

    Returns:
        Dict with the public url, stored filename, size in bytes and mimetype

    Raises:
        HTTPException: 400 for unsupported types or files above MAX_UPLOAD_SIZE
    """
    if upload.content_type not in IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only JPEG, PNG, and WebP images are allowed.",
        )

    contents = await upload.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(contents) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
        )

    target_dir = os.path.join(settings.UPLOAD_DIR, EVENT_IMAGE_SUBDIR)
    os.makedirs(target_dir, exist_ok=True)

    filename = _unique_filename(upload.content_type)
    with open(os.path.join(target_dir, filename), "wb") as buffer:
        buffer.write(contents)

    logger.info(f"Image uploaded: {filename}")
    return {
        "url": f"/uploads/{EVENT_IMAGE_SUBDIR}/{filename}",
        "filename": filename,
        "size": len(contents),
        "mimetype": upload.content_type,
    }
