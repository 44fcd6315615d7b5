"""
Pydantic schemas for authentication request/response validation.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(default="", alias="currentPassword")
    new_password: str = Field(default="", alias="newPassword")

    model_config = {"populate_by_name": True}


class UserPublic(BaseModel):
    id: int
    username: str
    role: str

    model_config = {"from_attributes": True}


class UserEnvelope(BaseModel):
    user: UserPublic


class MessageResponse(BaseModel):
    message: str
