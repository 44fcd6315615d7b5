"""
Booking of a resource for a [start_dt, end_dt) window.

Key design decisions:
- `resource_name` is a snapshot taken at request time
- Status moves REQUEST -> ONGOING -> SUCCESS, or to CANCEL from an active state;
  each transition stamps its own timestamp column
- Index on (kind, resource_id, status) backs the overlap query; on PostgreSQL
  an exclusion constraint (see alembic) forbids overlapping active bookings
"""

import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    REQUEST = "REQUEST"
    ONGOING = "ONGOING"
    SUCCESS = "SUCCESS"
    CANCEL = "CANCEL"


ACTIVE_STATUSES = (BookingStatus.REQUEST.value, BookingStatus.ONGOING.value)
TERMINAL_STATUSES = (BookingStatus.SUCCESS.value, BookingStatus.CANCEL.value)


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(50), nullable=False)
    resource_id = Column(Integer, ForeignKey("resources.id"), nullable=False)
    resource_name = Column(String(255), nullable=False)
    start_dt = Column(DateTime(timezone=True), nullable=False)
    end_dt = Column(DateTime(timezone=True), nullable=False)
    quantity = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default=BookingStatus.REQUEST.value)
    requester_name = Column(String(255), nullable=True)
    requester_role = Column(String(100), nullable=True)
    purpose = Column(String(1000), nullable=True)

    started_at = Column(DateTime(timezone=True), nullable=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    canceled_at = Column(DateTime(timezone=True), nullable=True)

    resource = relationship("Resource", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("end_dt > start_dt", name="check_booking_window"),
        CheckConstraint(
            "status IN ('REQUEST', 'ONGOING', 'SUCCESS', 'CANCEL')",
            name="check_booking_status",
        ),
        Index("ix_bookings_kind_resource_status", "kind", "resource_id", "status"),
        Index("ix_bookings_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, resource={self.resource_id}, status={self.status})>"
