"""
Authentication service: login/logout against the server-side session store
and password changes.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.session import UserSession
from app.models.user import AdminUser
from app.core.config import get_settings
from app.core.exceptions import AuthenticationError, ValidationError
from app.core.metrics import record_login
from app.core.security import (
    MAX_PASSWORD_BYTES,
    hash_password,
    new_session_token,
    password_too_long,
    verify_password,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


async def login(db: AsyncSession, username: str, password: str) -> tuple[AdminUser, str]:
    """
    Verify credentials and open a session.
    Returns the user and the session token to place in the cookie.
    """
    if not username or not password:
        raise ValidationError("Username and password required")

    result = await db.execute(select(AdminUser).where(AdminUser.username == username))
    user = result.scalar_one_or_none()

    if not user or not verify_password(password, user.password_hash):
        record_login(False)
        logger.warning("login_failed", username=username)
        raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")

    settings = get_settings()
    now = datetime.now(timezone.utc)

    # Opportunistic cleanup of expired sessions
    await db.execute(
        delete(UserSession)
        .where(UserSession.expires_at <= now)
        .execution_options(synchronize_session=False)
    )

    session = UserSession(
        id=new_session_token(),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS),
    )
    db.add(session)
    await db.flush()

    record_login(True)
    logger.info("user_logged_in", user_id=user.id, role=user.role)
    return user, session.id


async def logout(db: AsyncSession, token: Optional[str]) -> None:
    if not token:
        return
    result = await db.execute(
        delete(UserSession)
        .where(UserSession.id == token)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.info("user_logged_out")


async def resolve_session(db: AsyncSession, token: Optional[str]) -> Optional[AdminUser]:
    """Return the user owning a live session, or None."""
    if not token:
        return None
    result = await db.execute(select(UserSession).where(UserSession.id == token))
    session = result.scalar_one_or_none()
    if session is None or session.is_expired(datetime.now(timezone.utc)):
        return None
    return session.user


async def change_password(
    db: AsyncSession,
    user_id: int,
    current_password: str,
    new_password: str,
) -> None:
    settings = get_settings()
    if not current_password or not new_password:
        raise ValidationError("Current and new password required")
    if len(new_password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"New password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
        )
    if password_too_long(new_password):
        raise ValidationError(f"New password must be at most {MAX_PASSWORD_BYTES} bytes")

    user = await db.get(AdminUser, user_id)
    if not user or not verify_password(current_password, user.password_hash):
        logger.warning("password_change_failed", user_id=user_id)
        raise AuthenticationError("Current password is incorrect", code="INVALID_CREDENTIALS")

    user.password_hash = hash_password(new_password)
    await db.flush()
    logger.info("password_changed", user_id=user_id)


async def upsert_admin(db: AsyncSession, username: str, password: str, role: str = "ADMIN") -> AdminUser:
    """Create the user, or reset its password hash if it already exists."""
    if password_too_long(password):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    result = await db.execute(select(AdminUser).where(AdminUser.username == username))
    user = result.scalar_one_or_none()
    if user is None:
        user = AdminUser(username=username, password_hash=hash_password(password), role=role)
        db.add(user)
        logger.info("admin_seeded", username=username, created=True)
    else:
        user.password_hash = hash_password(password)
        logger.info("admin_seeded", username=username, created=False)
    await db.flush()
    return user
