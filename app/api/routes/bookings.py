"""
Booking endpoints: public request submission and listing, staff-only
lifecycle transitions.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, require_staff
from app.db.session import get_db
from app.schemas.booking import BookingCreate, BookingResponse
from app.services import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("", response_model=list[BookingResponse])
async def list_bookings(db: AsyncSession = Depends(get_db)):
    """All bookings, newest first."""
    return await booking_service.list_bookings(db)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Request a resource for a time window.

    Returns 409 CONFLICT when another REQUEST/ONGOING booking of the same
    resource overlaps the window. Windows that merely touch are accepted.
    """
    return await booking_service.create_booking(db, booking_data)


@router.post("/{booking_id}/start", response_model=BookingResponse)
async def start_booking(
    booking_id: int,
    user: CurrentUser = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.start_booking(db, booking_id)


@router.post("/{booking_id}/finish", response_model=BookingResponse)
async def finish_booking(
    booking_id: int,
    user: CurrentUser = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.finish_booking(db, booking_id)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    user: CurrentUser = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.cancel_booking(db, booking_id)
