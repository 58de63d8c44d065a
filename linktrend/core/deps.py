from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from linktrend.core.access import is_admin
from linktrend.core.config import settings
from linktrend.core.db import get_db
from linktrend.core.exceptions import Forbidden, SessionUserNotFound, Unauthenticated
from linktrend.modules.auth import models, service as auth_service


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_current_user_optional(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db)
) -> Optional[models.User]:
    _, user = await auth_service.resolve_session(db, token)
    return user


async def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db)
) -> models.User:
    session, user = await auth_service.resolve_session(db, token)
    if session is None:
        raise Unauthenticated()
    if user is None:
        raise SessionUserNotFound()
    return user


async def require_admin(
    current_user: models.User = Depends(get_current_user)
) -> models.User:
    if not is_admin(current_user):
        raise Forbidden()
    return current_user
