import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from linktrend.core.db import parse_uuid
from linktrend.core.exceptions import NotFound
from linktrend.core.storage import BunnyStorage
from linktrend.modules.admin import service as admin_service
from linktrend.modules.videos import models, schemas

logger = logging.getLogger(__name__)


async def create_video(db: AsyncSession, video_in: schemas.VideoCreate) -> models.Video:
    data = video_in.model_dump()
    data["upload_date"] = video_in.upload_date or date.today().isoformat()

    video = models.Video(
        **data,
        is_premium=video_in.price > 0,
        views=0,
    )
    db.add(video)
    await db.commit()
    logger.info("Created video %s (%s, price=%s)", video.id, video.title, video.price)
    return video


async def get_video(db: AsyncSession, video_id) -> models.Video:
    v_id = parse_uuid(video_id)
    video = await db.get(models.Video, v_id) if v_id else None
    if not video:
        raise NotFound("Video not found")
    return video


async def list_videos(db: AsyncSession) -> List[models.Video]:
    result = await db.execute(
        select(models.Video).order_by(models.Video.created_at.desc())
    )
    return result.scalars().all()


async def list_videos_by_creator(db: AsyncSession, creator_id: str) -> List[models.Video]:
    result = await db.execute(
        select(models.Video)
        .where(models.Video.creator_id == creator_id)
        .order_by(models.Video.created_at.desc())
    )
    return result.scalars().all()


async def increment_views(db: AsyncSession, video_id) -> models.Video:
    v_id = parse_uuid(video_id)
    if v_id is None:
        raise NotFound("Video not found")

    result = await db.execute(
        update(models.Video)
        .where(models.Video.id == v_id)
        .values(views=models.Video.views + 1)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFound("Video not found")
    await db.commit()

    return await db.get(models.Video, v_id, populate_existing=True)


async def delete_video(
    db: AsyncSession,
    storage: BunnyStorage,
    video_id,
    current_admin_id=None
) -> None:
    video = await get_video(db, video_id)

    # Best effort: a storage failure must not keep the catalog entry alive
    for url in (video.video_url, video.thumbnail_url):
        key = storage.key_from_url(url)
        if key is None:
            logger.warning("Video %s: %s is not a storage URL, skipping delete", video.id, url)
            continue
        if not await storage.delete_file(key):
            logger.warning("Video %s: could not delete %s from storage", video.id, key)

    await db.delete(video)
    admin_service.create_audit_log(
        db,
        action="video.delete",
        user_id=current_admin_id,
        target_type="video",
        target_id=str(video.id),
        metadata={"title": video.title},
    )
    await db.commit()
    logger.info("Deleted video %s", video.id)
