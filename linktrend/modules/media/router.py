import logging
import re
import time
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from linktrend.core import deps
from linktrend.core.config import settings
from linktrend.core.storage import BunnyStorage, get_storage
from linktrend.modules.auth import models as auth_models
from linktrend.modules.media import probe, schemas

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_CHUNK_SIZE = 1024 * 1024


def build_storage_key(folder: str, filename: str) -> str:
    """videos/<epoch millis>_<name with whitespace replaced>"""
    safe_name = re.sub(r"\s+", "_", filename or "") or "unnamed_file"
    return f"{folder}/{int(time.time() * 1000)}_{safe_name}"


async def read_upload(file: UploadFile, expected_type: str) -> bytes:
    if not file.content_type or not file.content_type.startswith(f"{expected_type}/"):
        raise HTTPException(status_code=400, detail=f"Invalid file type. Expected {expected_type}.")

    chunks = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.MAX_UPLOAD_BYTES:
            logger.warning("Rejected %s: over %d bytes", file.filename, settings.MAX_UPLOAD_BYTES)
            raise HTTPException(status_code=413, detail="File too large")
        chunks.append(chunk)

    data = b"".join(chunks)
    logger.info("Received %s (%s, %d bytes)", file.filename, file.content_type, len(data))
    return data


@router.post("/video", response_model=schemas.UploadResponse)
async def upload_video(
    video: UploadFile = File(...),
    storage: BunnyStorage = Depends(get_storage)
) -> Any:
    data = await read_upload(video, "video")

    duration = await probe.probe_duration(data, suffix=Path(video.filename or "").suffix or ".mp4")

    file_name = build_storage_key("videos", video.filename)
    url = await storage.upload_file(file_name, data, video.content_type)
    logger.info("Video uploaded to %s (duration %s)", url, duration)

    return {"url": url, "file_name": file_name, "duration": duration}


@router.post("/thumbnail", response_model=schemas.UploadResponse)
async def upload_thumbnail(
    thumbnail: UploadFile = File(...),
    storage: BunnyStorage = Depends(get_storage)
) -> Any:
    data = await read_upload(thumbnail, "image")

    file_name = build_storage_key("thumbnails", thumbnail.filename)
    url = await storage.upload_file(file_name, data, thumbnail.content_type)
    logger.info("Thumbnail uploaded to %s", url)

    return {"url": url, "file_name": file_name}


@router.get("/test")
async def test_storage(
    current_user: auth_models.User = Depends(deps.require_admin),
    storage: BunnyStorage = Depends(get_storage)
) -> Any:
    """
    Lists the zone root to check the storage credentials (Admin only).
    """
    files = await storage.list_files("")
    return {
        "success": True,
        "storage_zone": storage.storage_zone,
        "files": files,
    }
