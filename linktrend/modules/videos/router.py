from typing import Any, List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from linktrend.core import deps
from linktrend.core.access import can_view
from linktrend.core.db import get_db
from linktrend.core.storage import BunnyStorage, get_storage
from linktrend.modules.auth import models as auth_models
from linktrend.modules.videos import schemas, service

router = APIRouter()

@router.post("", response_model=schemas.VideoRead)
async def create_video(
    video_in: schemas.VideoCreate,
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.create_video(db, video_in)

@router.get("", response_model=List[schemas.VideoRead])
async def list_videos(
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Whole catalog, newest first.
    """
    return await service.list_videos(db)

@router.get("/creator/{creator_id}", response_model=List[schemas.VideoRead])
async def list_creator_videos(
    creator_id: str,
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_videos_by_creator(db, creator_id)

@router.get("/{video_id}", response_model=schemas.VideoRead)
async def get_video(
    video_id: str,
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_video(db, video_id)

@router.get("/{video_id}/access", response_model=schemas.VideoAccess)
async def check_access(
    video_id: str,
    current_user: Optional[auth_models.User] = Depends(deps.get_current_user_optional),
    db: AsyncSession = Depends(get_db)
) -> Any:
    video = await service.get_video(db, video_id)
    return {
        "video_id": video.id,
        "is_premium": video.is_premium,
        "access": can_view(video, current_user),
    }

@router.post("/{video_id}/view", response_model=schemas.VideoRead)
async def increment_views(
    video_id: str,
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.increment_views(db, video_id)

@router.delete("/{video_id}")
async def delete_video(
    video_id: str,
    current_user: auth_models.User = Depends(deps.require_admin),
    storage: BunnyStorage = Depends(get_storage),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Delete catalog entry and its files on the CDN (Admin only).
    """
    await service.delete_video(db, storage, video_id, current_user.id)
    return {"success": True}
