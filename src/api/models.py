"""Pydantic models for API request/response."""

import os
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from domain.model.user import Gender, User


def expose_password_hash() -> bool:
    """Whether user responses include the stored password hash (legacy clients)."""
    return os.getenv("EXPOSE_PASSWORD_HASH", "false").strip().lower() in ("1", "true", "yes")


class GoogleLoginRequest(BaseModel):
    """Request model for identity-provider sign-in."""
    id_token: str = Field(..., min_length=1, description="Google ID token")


class RegisterRequest(BaseModel):
    """Request model for email registration."""
    email: EmailStr
    password: str
    name: Optional[str] = None
    phone: Optional[str] = None


class EmailLoginRequest(BaseModel):
    """Request model for email login."""
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refreshToken: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    """Profile fields a user may change. Anything else in the body, email included, is ignored."""
    name: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None


class UserResponse(BaseModel):
    """Outbound representation of a stored user."""
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    user_photo: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    google_id: Optional[str] = None
    password: Optional[str] = Field(None, description="Password hash; only present when EXPOSE_PASSWORD_HASH is enabled")
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            phone=user.phone,
            user_photo=user.user_photo,
            age=user.age,
            gender=user.gender,
            google_id=user.google_id,
            password=user.password_hash,
            createdAt=user.created_at,
            updatedAt=user.updated_at,
        )


def serialize_user(user: User) -> dict:
    """Convert a domain User into a JSON-ready dict, hiding the hash unless enabled."""
    exclude = None if expose_password_hash() else {"password"}
    return UserResponse.from_domain(user).model_dump(mode="json", exclude=exclude)


class AuthResponse(BaseModel):
    """Response model for sign-in and registration."""
    user: dict
    accessToken: str
    refreshToken: str
    isNewUser: bool


class RefreshResponse(BaseModel):
    accessToken: str


class ProfileResponse(BaseModel):
    user: dict


class ErrorResponse(BaseModel):
    error: str
