from typing import Any, List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from linktrend.core import deps
from linktrend.core.db import get_db
from linktrend.modules.auth import models as auth_models
from linktrend.modules.transactions import schemas, service

router = APIRouter()

@router.post("", response_model=schemas.TransactionRead)
async def submit_transaction(
    payment_in: schemas.TransactionCreate,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Submit proof of a mobile-money payment. Access is granted only after review.
    """
    return await service.submit_transaction(db, payment_in)

@router.get("", response_model=List[schemas.TransactionRead])
async def list_transactions(
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_transactions(db)

@router.get("/pending", response_model=List[schemas.TransactionRead])
async def list_pending_transactions(
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_pending_transactions(db)

@router.get("/me", response_model=List[schemas.TransactionRead])
async def list_my_transactions(
    current_user: auth_models.User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    The caller's own payment requests, so the player can show a pending state.
    """
    return await service.list_user_transactions(db, current_user.id)

@router.post("/{transaction_id}/approve", response_model=schemas.TransactionRead)
async def approve_transaction(
    transaction_id: str,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.approve_transaction(db, transaction_id, current_user.id)

@router.post("/{transaction_id}/reject", response_model=schemas.TransactionRead)
async def reject_transaction(
    transaction_id: str,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.reject_transaction(db, transaction_id, current_user.id)
