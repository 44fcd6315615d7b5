"""
Server-side login session. The cookie carries only ``id``.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base, utcnow


class UserSession(Base):
    __tablename__ = "user_sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("admin_users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("AdminUser", back_populates="sessions", lazy="joined")

    def is_expired(self, now: datetime) -> bool:
        expires_at = self.expires_at
        # SQLite hands timestamps back naive; they are stored as UTC
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now

    def __repr__(self) -> str:
        return f"<UserSession(user={self.user_id}, expires_at={self.expires_at})>"
