"""
Request-scoped identity and role guards.

The session cookie is resolved once into a CurrentUser value that handlers
receive explicitly; role checks are delegated to app.core.security.check_role.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.core.config import get_settings
from app.core.exceptions import AuthenticationError
from app.core.security import check_role, STAFF_ROLES
from app.services.auth_service import resolve_session


@dataclass(frozen=True)
class CurrentUser:
    id: int
    username: str
    role: str


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(get_settings().SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    user = await resolve_session(db, session_token(request))
    if user is None:
        raise AuthenticationError()
    return CurrentUser(id=user.id, username=user.username, role=user.role)


def require_roles(*roles: str) -> Callable:
    allowed = frozenset(roles) or STAFF_ROLES

    async def guard(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        check_role(user.role, allowed)
        return user

    return guard


require_staff = require_roles(*STAFF_ROLES)
