import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from linktrend.core.config import settings
from linktrend.modules.auth import models, schemas

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[models.User]:
    result = await db.execute(select(models.User).where(models.User.email == email))
    return result.scalars().first()


async def get_or_create_user(
    db: AsyncSession,
    email: str,
    name: str,
    avatar_url: Optional[str] = None
) -> models.User:
    user = await get_user_by_email(db, email)
    if user:
        return user

    user = models.User(email=email, name=name, avatar_url=avatar_url, unlocks=[])
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Another request created the same email first
        await db.rollback()
        user = await get_user_by_email(db, email)
        if user is None:
            raise
        return user

    logger.info("Created user %s (%s)", user.id, email)
    return user


async def ensure_admin_user(db: AsyncSession) -> models.User:
    return await get_or_create_user(db, settings.ADMIN_EMAIL, settings.ADMIN_NAME)


def check_admin_credentials(username: str, password: str) -> bool:
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return False
    username_ok = secrets.compare_digest(username.encode(), settings.ADMIN_USERNAME.encode())
    password_ok = secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
    return username_ok and password_ok


async def update_profile(db: AsyncSession, user: models.User, user_in: schemas.UserUpdate) -> models.User:
    if user_in.name is not None:
        user.name = user_in.name
    if user_in.avatar_url is not None:
        user.avatar_url = user_in.avatar_url

    db.add(user)
    await db.commit()
    return user


# Sessions

async def create_session(db: AsyncSession, user: models.User) -> str:
    token = secrets.token_urlsafe(32)
    now = datetime.now(timezone.utc)
    db.add(models.Session(
        token=token,
        user_id=user.id,
        email=user.email,
        created_at=now,
        expires_at=now + timedelta(days=settings.SESSION_TTL_DAYS),
    ))
    await db.commit()
    return token


def _is_expired(session: models.Session) -> bool:
    expires_at = session.expires_at
    # SQLite hands back naive datetimes
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= datetime.now(timezone.utc)


async def resolve_session(
    db: AsyncSession,
    token: Optional[str]
) -> Tuple[Optional[models.Session], Optional[models.User]]:
    """
    Returns (session, user). session is None when the token is missing, unknown
    or expired; user is None when the session's user no longer exists.
    """
    if not token:
        return None, None

    session = await db.get(models.Session, token)
    if session is None:
        return None, None

    if _is_expired(session):
        await db.delete(session)
        await db.commit()
        return None, None

    user = await db.get(models.User, session.user_id)
    return session, user


async def destroy_session(db: AsyncSession, token: Optional[str]) -> None:
    if not token:
        return
    await db.execute(delete(models.Session).where(models.Session.token == token))
    await db.commit()


async def destroy_user_sessions(db: AsyncSession, user_id) -> None:
    # Caller commits
    await db.execute(delete(models.Session).where(models.Session.user_id == user_id))
