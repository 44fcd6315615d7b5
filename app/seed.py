"""
Seed (or reset) the back-office admin account.

    python -m app.seed [--username admin] [--password admin123] [--role ADMIN]

Defaults come from SEED_ADMIN_USERNAME / SEED_ADMIN_PASSWORD.
"""

import argparse
import asyncio

from app.core.config import get_settings
from app.core.logging import setup_logging, get_logger
from app.db.session import AsyncSessionLocal, engine, init_models
from app.core.security import MAX_PASSWORD_BYTES, password_too_long
from app.models.user import UserRole
from app.services.auth_service import upsert_admin

logger = get_logger(__name__)


async def seed(username: str, password: str, role: str) -> None:
    await init_models()
    try:
        async with AsyncSessionLocal() as db:
            await upsert_admin(db, username, password, role)
            await db.commit()
        logger.info("seed_complete", username=username, role=role)
    finally:
        await engine.dispose()


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed the admin user")
    parser.add_argument("--username", default=settings.SEED_ADMIN_USERNAME)
    parser.add_argument("--password", default=settings.SEED_ADMIN_PASSWORD)
    parser.add_argument("--role", default=UserRole.ADMIN.value, choices=[r.value for r in UserRole])
    args = parser.parse_args()
    if password_too_long(args.password):
        parser.error(f"password must be at most {MAX_PASSWORD_BYTES} bytes")

    setup_logging()
    asyncio.run(seed(args.username, args.password, args.role))


if __name__ == "__main__":
    main()
