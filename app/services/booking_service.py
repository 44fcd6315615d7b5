"""
Booking service: conflict-checked creation and lifecycle transitions.

CONFLICT DETECTION
==================

Two bookings for the same (kind, resource) clash when both are active
(REQUEST/ONGOING) and their half-open windows [start, end) overlap:

    NOT (existing.end <= new.start OR existing.start >= new.end)

Touching windows (one ends exactly when the other starts) do not clash.

Check-then-insert must be atomic or two concurrent requests can both pass
the check. Within the request transaction we:

  1. SELECT the resource row FOR UPDATE. Concurrent bookings for the same
     resource queue up behind this lock until the first one commits.
  2. Run the overlap query.
  3. INSERT the booking.

On PostgreSQL the `ex_bookings_active_no_overlap` exclusion constraint
(btree_gist over tstzrange) is the final safety net; a violation is
reported as the same CONFLICT error.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, or_, not_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking, BookingStatus, ACTIVE_STATUSES, TERMINAL_STATUSES
from app.models.resource import Resource
from app.schemas.booking import BookingCreate
from app.services.booking_lifecycle import apply_transition, get_transition
from app.core.config import get_settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.metrics import record_booking_attempt, record_booking_transition
from app.core.logging import get_logger

logger = get_logger(__name__)

CONFLICT_MESSAGE = "That resource is already booked for this time window. Please choose another time."


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    return not (a_end <= b_start or a_start >= b_end)


def validate_window(start: datetime, end: datetime) -> None:
    if end <= start:
        raise ValidationError("End time must be after start time", code="INVALID_WINDOW")


async def find_conflict(
    db: AsyncSession,
    kind: str,
    resource_id: int,
    start: datetime,
    end: datetime,
    exclude_id: Optional[int] = None,
) -> Optional[Booking]:
    """First active booking on (kind, resource) overlapping [start, end), if any."""
    query = select(Booking).where(
        Booking.kind == kind,
        Booking.resource_id == resource_id,
        Booking.status.in_(ACTIVE_STATUSES),
        not_(or_(Booking.end_dt <= start, Booking.start_dt >= end)),
    )
    if exclude_id is not None:
        query = query.where(Booking.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


def _is_overlap_violation(error: IntegrityError) -> bool:
    text = str(error.orig).lower()
    return "ex_bookings_active_no_overlap" in text or "exclusion" in text


async def create_booking(db: AsyncSession, data: BookingCreate) -> Booking:
    start = to_utc(data.start_dt)
    end = to_utc(data.end_dt)
    try:
        validate_window(start, end)
    except ValidationError:
        record_booking_attempt("invalid")
        raise

    # Serializes concurrent bookings of the same resource
    locked = await db.execute(
        select(Resource.id).where(Resource.id == data.resource_id).with_for_update()
    )
    if locked.first() is None:
        record_booking_attempt("invalid")
        raise NotFoundError(f"Resource {data.resource_id} not found")

    clash = await find_conflict(db, data.kind, data.resource_id, start, end)
    if clash is not None:
        record_booking_attempt("conflict")
        logger.info(
            "booking_conflict",
            kind=data.kind,
            resource_id=data.resource_id,
            existing_booking_id=clash.id,
        )
        raise ConflictError(CONFLICT_MESSAGE, code="CONFLICT")

    booking = Booking(
        kind=data.kind,
        resource_id=data.resource_id,
        resource_name=data.resource_name,
        start_dt=start,
        end_dt=end,
        quantity=data.quantity or None,
        status=BookingStatus.REQUEST.value,
        requester_name=data.requester_name or None,
        requester_role=data.requester_role or None,
        purpose=data.purpose or None,
    )
    db.add(booking)
    try:
        await db.flush()
    except IntegrityError as e:
        if _is_overlap_violation(e):
            record_booking_attempt("conflict")
            raise ConflictError(CONFLICT_MESSAGE, code="CONFLICT") from e
        record_booking_attempt("error")
        raise
    await db.refresh(booking)

    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        kind=booking.kind,
        resource_id=booking.resource_id,
    )
    return booking


async def list_bookings(db: AsyncSession) -> list[Booking]:
    """All bookings, newest first."""
    result = await db.execute(
        select(Booking).order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())


async def get_booking(db: AsyncSession, booking_id: int, for_update: bool = False) -> Booking:
    query = select(Booking).where(Booking.id == booking_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError(f"Booking {booking_id} not found")
    return booking


async def _ensure_window_free(db: AsyncSession, booking: Booking, action: str) -> None:
    """Re-activating a terminal booking must not overlap an active one."""
    await db.execute(
        select(Resource.id).where(Resource.id == booking.resource_id).with_for_update()
    )
    clash = await find_conflict(
        db,
        booking.kind,
        booking.resource_id,
        to_utc(booking.start_dt),
        to_utc(booking.end_dt),
        exclude_id=booking.id,
    )
    if clash is not None:
        record_booking_transition(action, "rejected")
        logger.info(
            "booking_conflict",
            booking_id=booking.id,
            action=action,
            existing_booking_id=clash.id,
        )
        raise ConflictError(CONFLICT_MESSAGE, code="CONFLICT")


async def transition_booking(db: AsyncSession, booking_id: int, action: str) -> Booking:
    try:
        booking = await get_booking(db, booking_id, for_update=True)
    except NotFoundError:
        record_booking_transition(action, "not_found")
        raise

    previous = booking.status
    strict = get_settings().BOOKING_STRICT_TRANSITIONS
    reactivating = (
        previous in TERMINAL_STATUSES
        and get_transition(action).target.value in ACTIVE_STATUSES
    )
    if reactivating and not strict:
        await _ensure_window_free(db, booking, action)

    try:
        apply_transition(booking, action, datetime.now(timezone.utc), strict=strict)
    except ConflictError:
        record_booking_transition(action, "rejected")
        logger.warning("booking_transition_rejected", booking_id=booking_id, action=action, status=previous)
        raise

    try:
        await db.flush()
    except IntegrityError as e:
        if _is_overlap_violation(e):
            record_booking_transition(action, "rejected")
            raise ConflictError(CONFLICT_MESSAGE, code="CONFLICT") from e
        raise
    await db.refresh(booking)

    record_booking_transition(action, "ok")
    logger.info(
        "booking_transitioned",
        booking_id=booking.id,
        action=action,
        from_status=previous,
        to_status=booking.status,
    )
    return booking


async def start_booking(db: AsyncSession, booking_id: int) -> Booking:
    return await transition_booking(db, booking_id, "start")


async def finish_booking(db: AsyncSession, booking_id: int) -> Booking:
    return await transition_booking(db, booking_id, "finish")


async def cancel_booking(db: AsyncSession, booking_id: int) -> Booking:
    return await transition_booking(db, booking_id, "cancel")
