"""
Manual mobile-money unlock workflow.

A user submits the reference of a payment they made; the request sits as
`pending` until an admin approves it (unlocking the video for that user) or
rejects it. Both outcomes are terminal.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from linktrend.core.db import parse_uuid
from linktrend.core.exceptions import DuplicateReference, NotFound, ValidationError
from linktrend.modules.admin import service as admin_service
from linktrend.modules.auth import models as auth_models
from linktrend.modules.transactions import models, schemas
from linktrend.modules.videos import models as video_models

logger = logging.getLogger(__name__)


async def get_transaction_by_reference(db: AsyncSession, trx_id: str) -> Optional[models.Transaction]:
    result = await db.execute(
        select(models.Transaction).where(models.Transaction.trx_id == trx_id)
    )
    return result.scalars().first()


async def submit_transaction(db: AsyncSession, payment_in: schemas.TransactionCreate) -> models.Transaction:
    # Repeat the boundary checks; the service is callable without the API layer
    if not schemas.is_valid_mobile_number(payment_in.mobile_number):
        raise ValidationError("Invalid Bangladeshi mobile number")
    if not payment_in.trx_id:
        raise ValidationError("Transaction ID is required")

    video = await db.get(video_models.Video, payment_in.video_id)
    if not video:
        raise NotFound("Video not found")

    if await get_transaction_by_reference(db, payment_in.trx_id):
        logger.warning("Rejected duplicate transaction reference %s", payment_in.trx_id)
        raise DuplicateReference()

    transaction = models.Transaction(
        video_id=payment_in.video_id,
        user_id=payment_in.user_id,
        amount=payment_in.amount,
        method=payment_in.method,
        mobile_number=payment_in.mobile_number,
        trx_id=payment_in.trx_id,
        status=models.TransactionStatus.PENDING,
    )
    db.add(transaction)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent submission of the same reference
        await db.rollback()
        raise DuplicateReference()

    logger.info(
        "Payment request %s submitted: user=%s video=%s amount=%s via %s",
        transaction.id, transaction.user_id, transaction.video_id, transaction.amount, transaction.method.value
    )
    return transaction


async def list_transactions(db: AsyncSession) -> List[models.Transaction]:
    result = await db.execute(
        select(models.Transaction).order_by(models.Transaction.created_at.desc())
    )
    return result.scalars().all()


async def list_pending_transactions(db: AsyncSession) -> List[models.Transaction]:
    result = await db.execute(
        select(models.Transaction)
        .where(models.Transaction.status == models.TransactionStatus.PENDING)
        .order_by(models.Transaction.created_at.desc())
    )
    return result.scalars().all()


async def list_user_transactions(db: AsyncSession, user_id: UUID) -> List[models.Transaction]:
    result = await db.execute(
        select(models.Transaction)
        .where(models.Transaction.user_id == user_id)
        .order_by(models.Transaction.created_at.desc())
    )
    return result.scalars().all()


async def _get_pending(db: AsyncSession, transaction_id) -> models.Transaction:
    # Missing and already-resolved transactions are reported the same way
    t_id = parse_uuid(transaction_id)
    transaction = await db.get(models.Transaction, t_id) if t_id else None
    if not transaction or transaction.status != models.TransactionStatus.PENDING:
        raise NotFound("Transaction not found")
    return transaction


async def _stage_approval(db: AsyncSession, transaction: models.Transaction, admin_id: Optional[UUID]) -> None:
    # Unlock first; status, unlock and audit entry commit together
    user = await db.get(auth_models.User, transaction.user_id)
    if user is None:
        logger.warning(
            "Approving transaction %s for missing user %s, nothing to unlock",
            transaction.id, transaction.user_id
        )
    elif user.unlock(transaction.video_id):
        db.add(user)

    transaction.status = models.TransactionStatus.APPROVED
    transaction.reviewed_at = datetime.now(timezone.utc)
    transaction.reviewed_by = admin_id

    admin_service.create_audit_log(
        db,
        action="transaction.approve",
        user_id=admin_id,
        target_type="transaction",
        target_id=str(transaction.id),
        metadata={
            "trx_id": transaction.trx_id,
            "amount": float(transaction.amount),
            "user_id": str(transaction.user_id),
            "video_id": str(transaction.video_id),
        },
    )


async def approve_transaction(db: AsyncSession, transaction_id, admin_id: Optional[UUID] = None) -> models.Transaction:
    transaction = await _get_pending(db, transaction_id)
    t_id, user_id = transaction.id, transaction.user_id

    await _stage_approval(db, transaction, admin_id)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent approval unlocked the same video for this user first
        await db.rollback()
        logger.info("Unlock for transaction %s already recorded, re-reading", t_id)

        transaction = await db.get(models.Transaction, t_id, populate_existing=True)
        if transaction is None or transaction.status == models.TransactionStatus.REJECTED:
            raise NotFound("Transaction not found")
        if transaction.status == models.TransactionStatus.APPROVED:
            return transaction

        await db.get(auth_models.User, user_id, populate_existing=True)
        await _stage_approval(db, transaction, admin_id)
        await db.commit()

    logger.info("Transaction %s approved, video %s unlocked for user %s",
                transaction.id, transaction.video_id, transaction.user_id)
    return transaction


async def reject_transaction(db: AsyncSession, transaction_id, admin_id: Optional[UUID] = None) -> models.Transaction:
    transaction = await _get_pending(db, transaction_id)

    transaction.status = models.TransactionStatus.REJECTED
    transaction.reviewed_at = datetime.now(timezone.utc)
    transaction.reviewed_by = admin_id

    admin_service.create_audit_log(
        db,
        action="transaction.reject",
        user_id=admin_id,
        target_type="transaction",
        target_id=str(transaction.id),
        metadata={"trx_id": transaction.trx_id, "user_id": str(transaction.user_id)},
    )

    await db.commit()
    logger.info("Transaction %s rejected", transaction.id)
    return transaction
