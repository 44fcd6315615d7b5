from app.schemas.user import LoginRequest, ChangePasswordRequest, UserPublic, UserEnvelope, MessageResponse
from app.schemas.resource import ResourceCreate, ResourceUpdate, ResourceResponse
from app.schemas.booking import BookingCreate, BookingResponse

__all__ = [
    "LoginRequest", "ChangePasswordRequest", "UserPublic", "UserEnvelope", "MessageResponse",
    "ResourceCreate", "ResourceUpdate", "ResourceResponse",
    "BookingCreate", "BookingResponse",
]
