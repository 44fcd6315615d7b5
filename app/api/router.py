"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import auth, resources, bookings

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(resources.router)
api_router.include_router(bookings.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    return {"ok": True}
