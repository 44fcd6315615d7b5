"""
Unit tests for the pure booking rules: overlap, windows, transitions, roles.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import AuthorizationError, ConflictError, ValidationError
from app.core.security import check_role, hash_password, verify_password, STAFF_ROLES
from app.models.booking import Booking
from app.services.booking_lifecycle import apply_transition, can_transition, get_transition
from app.services.booking_service import intervals_overlap, to_utc, validate_window
from app.services.resource_service import DeleteMode

T0 = datetime(2030, 1, 15, 10, 0, tzinfo=timezone.utc)
HOUR = timedelta(hours=1)


@pytest.mark.parametrize("b_start,b_end,expected", [
    (T0, T0 + HOUR, True),                        # identical
    (T0 + HOUR / 2, T0 + 3 * HOUR / 2, True),     # partial
    (T0 - HOUR, T0 + 2 * HOUR, True),             # enclosing
    (T0 + HOUR / 4, T0 + HOUR / 2, True),         # enclosed
    (T0 + HOUR, T0 + 2 * HOUR, False),            # touches end
    (T0 - HOUR, T0, False),                       # touches start
    (T0 + 2 * HOUR, T0 + 3 * HOUR, False),        # disjoint
])
def test_intervals_overlap(b_start, b_end, expected):
    assert intervals_overlap(T0, T0 + HOUR, b_start, b_end) is expected
    assert intervals_overlap(b_start, b_end, T0, T0 + HOUR) is expected


def test_validate_window():
    validate_window(T0, T0 + HOUR)
    with pytest.raises(ValidationError):
        validate_window(T0, T0)
    with pytest.raises(ValidationError):
        validate_window(T0 + HOUR, T0)


def test_to_utc():
    naive = datetime(2030, 1, 15, 10, 0)
    assert to_utc(naive) == T0
    plus_two = datetime(2030, 1, 15, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_utc(plus_two).hour == 10
    assert to_utc(plus_two).tzinfo == timezone.utc


@pytest.mark.parametrize("status,action,allowed", [
    ("REQUEST", "start", True),
    ("ONGOING", "start", False),
    ("REQUEST", "finish", False),
    ("ONGOING", "finish", True),
    ("REQUEST", "cancel", True),
    ("ONGOING", "cancel", True),
    ("SUCCESS", "cancel", False),
    ("CANCEL", "start", False),
])
def test_can_transition(status, action, allowed):
    assert can_transition(status, action) is allowed


def test_apply_transition_stamps_fields():
    booking = Booking(status="REQUEST")
    apply_transition(booking, "start", T0)
    assert booking.status == "ONGOING"
    assert booking.started_at == T0
    assert booking.updated_at == T0

    apply_transition(booking, "finish", T0 + HOUR)
    assert booking.status == "SUCCESS"
    assert booking.ended_at == T0 + HOUR
    assert booking.canceled_at is None


def test_apply_transition_strict_rejects_terminal():
    booking = Booking(status="SUCCESS")
    with pytest.raises(ConflictError) as exc:
        apply_transition(booking, "cancel", T0)
    assert exc.value.code == "INVALID_TRANSITION"
    assert booking.status == "SUCCESS"


def test_apply_transition_permissive():
    booking = Booking(status="REQUEST")
    apply_transition(booking, "finish", T0, strict=False)
    assert booking.status == "SUCCESS"
    assert booking.ended_at == T0


def test_unknown_action():
    with pytest.raises(ValueError):
        get_transition("approve")


def test_check_role():
    check_role("ADMIN", STAFF_ROLES)
    check_role("STAFF", STAFF_ROLES)
    with pytest.raises(AuthorizationError):
        check_role("VIEWER", STAFF_ROLES)


@pytest.mark.parametrize("hard,mode,expected", [
    (None, None, DeleteMode.SOFT),
    ("true", None, DeleteMode.HARD),
    ("1", None, DeleteMode.HARD),
    ("HARD", None, DeleteMode.HARD),
    (None, "hard", DeleteMode.HARD),
    ("false", None, DeleteMode.SOFT),
    ("0", None, DeleteMode.SOFT),
])
def test_delete_mode_from_query(hard, mode, expected):
    assert DeleteMode.from_query(hard, mode) is expected


def test_password_hashing():
    hashed = hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret!", "not-a-bcrypt-hash")
