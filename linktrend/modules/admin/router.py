from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from linktrend.core.db import get_db
from linktrend.core import deps
from linktrend.modules.auth import models as auth_models
from linktrend.modules.auth import schemas as auth_schemas
from linktrend.modules.admin import schemas, service

# Mounted at /api/users
users_router = APIRouter()

# Mounted at /api/admin
router = APIRouter()

@users_router.get("", response_model=list[auth_schemas.UserRead])
async def get_all_users(
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Get all users, newest first (Admin only).
    """
    return await service.get_all_users(db)

@users_router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    await service.delete_user(db, user_id, current_user.id)
    return {"success": True}

@router.get("/stats", response_model=schemas.AdminStats)
async def get_admin_stats(
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_stats(db)

@router.get("/audit-logs", response_model=list[schemas.AuditLogRead])
async def get_audit_logs(
    limit: int = 50,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_audit_logs(db, limit)
