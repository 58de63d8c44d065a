import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from linktrend.core.db import parse_uuid
from linktrend.core.exceptions import NotFound
from linktrend.modules.auth import models as auth_models
from linktrend.modules.auth import service as auth_service
from linktrend.modules.admin.models import AuditLog
from uuid import UUID
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

def create_audit_log(
    db: AsyncSession,
    action: str,
    user_id: Optional[UUID] = None,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Stages an audit entry on the session. The caller's commit persists it
    together with the change it describes.
    """
    log = AuditLog(
        user_id=user_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id) if target_id else None,
        metadata_json=metadata,
    )
    db.add(log)
    return log

async def get_stats(db: AsyncSession) -> dict:
    # Imported here, the transactions and videos modules import this one
    from linktrend.modules.transactions import models as trx_models
    from linktrend.modules.videos import models as video_models

    total_users = (await db.execute(select(func.count(auth_models.User.id)))).scalar() or 0

    video_res = await db.execute(
        select(video_models.Video.is_premium, func.count(video_models.Video.id)).group_by(video_models.Video.is_premium)
    )
    video_counts = {row[0]: row[1] for row in video_res.all()}

    trx_res = await db.execute(
        select(trx_models.Transaction.status, func.count(trx_models.Transaction.id)).group_by(trx_models.Transaction.status)
    )
    trx_counts = {row[0]: row[1] for row in trx_res.all()}

    revenue_res = await db.execute(
        select(func.sum(trx_models.Transaction.amount))
        .where(trx_models.Transaction.status == trx_models.TransactionStatus.APPROVED)
    )
    revenue_total = revenue_res.scalar() or 0.0

    return {
        "total_users": total_users,
        "total_videos": sum(video_counts.values()),
        "premium_videos": video_counts.get(True, 0),
        "pending_transactions": trx_counts.get(trx_models.TransactionStatus.PENDING, 0),
        "approved_transactions": trx_counts.get(trx_models.TransactionStatus.APPROVED, 0),
        "revenue_total": float(revenue_total),
    }

async def get_all_users(db: AsyncSession):
    result = await db.execute(
        select(auth_models.User)
        .order_by(auth_models.User.created_at.desc())
    )
    return result.scalars().all()

async def delete_user(db: AsyncSession, user_id: str, current_admin_id: Optional[UUID] = None) -> None:
    u_id = parse_uuid(user_id)
    user = await db.get(auth_models.User, u_id) if u_id else None
    if not user:
        raise NotFound("User not found")

    email = user.email
    await auth_service.destroy_user_sessions(db, user.id)
    await db.delete(user)
    create_audit_log(
        db,
        action="user.delete",
        user_id=current_admin_id,
        target_type="user",
        target_id=str(u_id),
        metadata={"email": email},
    )
    await db.commit()
    logger.info("Deleted user %s (%s)", u_id, email)

async def get_audit_logs(db: AsyncSession, limit: int = 50):
    result = await db.execute(select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit))
    return result.scalars().all()
