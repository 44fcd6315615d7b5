"""
Booking status machine.

    REQUEST --start--> ONGOING --finish--> SUCCESS
       |                  |
       +-----cancel-------+-----> CANCEL

SUCCESS and CANCEL are terminal. Each action stamps its own timestamp column.
With strict=False the source state is not checked (legacy behaviour); the
caller must then re-run the overlap check when a terminal booking becomes
active again.
"""

from dataclasses import dataclass
from datetime import datetime

from app.core.exceptions import ConflictError
from app.models.booking import Booking, BookingStatus


@dataclass(frozen=True)
class Transition:
    action: str
    sources: frozenset
    target: BookingStatus
    stamp_field: str


TRANSITIONS = {
    "start": Transition(
        "start", frozenset({BookingStatus.REQUEST.value}), BookingStatus.ONGOING, "started_at"
    ),
    "finish": Transition(
        "finish", frozenset({BookingStatus.ONGOING.value}), BookingStatus.SUCCESS, "ended_at"
    ),
    "cancel": Transition(
        "cancel",
        frozenset({BookingStatus.REQUEST.value, BookingStatus.ONGOING.value}),
        BookingStatus.CANCEL,
        "canceled_at",
    ),
}


def get_transition(action: str) -> Transition:
    try:
        return TRANSITIONS[action]
    except KeyError:
        raise ValueError(f"Unknown booking action: {action}") from None


def can_transition(current: str, action: str) -> bool:
    return current in get_transition(action).sources


def apply_transition(booking: Booking, action: str, now: datetime, strict: bool = True) -> Booking:
    """Move ``booking`` through ``action`` in place, stamping ``now``."""
    transition = get_transition(action)
    if strict and booking.status not in transition.sources:
        raise ConflictError(
            f"Cannot {action} a booking in status {booking.status}",
            code="INVALID_TRANSITION",
        )
    booking.status = transition.target.value
    setattr(booking, transition.stamp_field, now)
    booking.updated_at = now
    return booking
