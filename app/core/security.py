"""
Password hashing, session tokens and role checks.

Passwords are hashed with bcrypt. Sessions are identified by an opaque random
token stored server-side (see app.models.session); the cookie only carries
the token.
"""

import secrets
from typing import Iterable

import bcrypt

from app.core.config import get_settings
from app.core.exceptions import AuthorizationError

# Roles allowed to mutate resources and move bookings through their lifecycle
STAFF_ROLES = frozenset({"ADMIN", "STAFF"})

# bcrypt only accepts this many bytes of input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    settings = get_settings()
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def check_role(role: str, allowed_roles: Iterable[str]) -> None:
    """Raise AuthorizationError unless ``role`` is one of ``allowed_roles``."""
    if role not in set(allowed_roles):
        raise AuthorizationError()
