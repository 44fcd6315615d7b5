from app.models.user import AdminUser, UserRole
from app.models.session import UserSession
from app.models.resource import Resource, ResourceStatus
from app.models.booking import Booking, BookingStatus, ACTIVE_STATUSES, TERMINAL_STATUSES

__all__ = [
    "AdminUser", "UserRole",
    "UserSession",
    "Resource", "ResourceStatus",
    "Booking", "BookingStatus", "ACTIVE_STATUSES", "TERMINAL_STATUSES",
]
