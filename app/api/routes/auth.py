"""
Authentication endpoints: cookie-session login, logout, whoami, password change.
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, get_current_user, require_staff, session_token
from app.db.session import get_db
from app.core.config import get_settings
from app.schemas.user import LoginRequest, ChangePasswordRequest, UserPublic, UserEnvelope, MessageResponse
from app.services import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=UserEnvelope)
async def login(
    login_data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Check credentials and set the session cookie."""
    settings = get_settings()
    user, token = await auth_service.login(db, login_data.username, login_data.password)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return UserEnvelope(user=UserPublic.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    await auth_service.logout(db, session_token(request))
    response.delete_cookie(get_settings().SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserEnvelope)
async def me(user: CurrentUser = Depends(get_current_user)):
    return UserEnvelope(user=UserPublic(id=user.id, username=user.username, role=user.role))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    user: CurrentUser = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(db, user.id, payload.current_password, payload.new_password)
    return MessageResponse(message="Password changed successfully")
