"""
Bookable resource (room, equipment, ...).

Key design decisions:
- `kind` is stored upper-cased; (kind, name) is unique
- Soft delete flips `status` to Inactive so booking history keeps its target
"""

import enum

from sqlalchemy import Column, Integer, String, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class ResourceStatus(str, enum.Enum):
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    INACTIVE = "Inactive"


class Resource(Base, TimestampMixin):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(50), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    subcategory = Column(String(255), nullable=True)
    type = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    status = Column(String(20), nullable=False, default=ResourceStatus.AVAILABLE.value)

    bookings = relationship("Booking", back_populates="resource", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("kind", "name", name="uq_resource_kind_name"),
        CheckConstraint("quantity >= 0", name="check_resource_quantity_non_negative"),
        CheckConstraint(
            "status IN ('Available', 'Maintenance', 'Inactive')",
            name="check_resource_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, kind={self.kind}, name={self.name}, status={self.status})>"
