import logging
from typing import Any, Optional
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from linktrend.core import deps
from linktrend.core.config import settings
from linktrend.core.db import get_db
from linktrend.core.exceptions import ExternalServiceFailure, Unauthenticated
from linktrend.modules.admin import service as admin_service
from linktrend.modules.auth import models, schemas, service
from linktrend.modules.auth.google import GoogleIdentityVerifier, get_identity_verifier

logger = logging.getLogger(__name__)

router = APIRouter()

def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )

@router.post("/login", response_model=schemas.UserRead)
async def login(
    login_in: schemas.LoginRequest,
    response: Response,
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Google ID token (`credential`) or admin username/password in, session cookie out.
    """
    if login_in.is_admin_login:
        if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
            logger.error("Admin login attempted but admin credentials are not configured")
            raise ExternalServiceFailure("Admin login not configured")
        if not service.check_admin_credentials(login_in.username, login_in.password):
            logger.warning("Failed admin login for username %r", login_in.username)
            raise Unauthenticated("Invalid credentials")

        user = await service.ensure_admin_user(db)
        admin_service.create_audit_log(db, action="auth.admin_login", user_id=user.id)
    else:
        claims = await verifier.verify(login_in.credential)
        user = await service.get_or_create_user(db, claims.email, claims.name, claims.picture)

    token = await service.create_session(db, user)
    set_session_cookie(response, token)
    return user

@router.get("/verify", response_model=Optional[schemas.UserRead])
async def verify_session(
    current_user: Optional[models.User] = Depends(deps.get_current_user_optional),
) -> Any:
    return current_user

@router.post("/logout")
async def logout(
    response: Response,
    token: Optional[str] = Depends(deps.get_session_token),
    db: AsyncSession = Depends(get_db)
) -> Any:
    await service.destroy_session(db, token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True}

@router.put("/me", response_model=schemas.UserRead)
async def update_me(
    user_in: schemas.UserUpdate,
    current_user: models.User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.update_profile(db, current_user, user_in)
