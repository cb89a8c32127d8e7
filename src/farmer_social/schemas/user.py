"""User and authentication Pydantic schemas."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from .common import Envelope, Pagination, UTCDateTime


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Public handle (letters, digits, '_', '.', '-')",
    )
    email: EmailStr
    # bcrypt only reads the first 72 bytes of a password.
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class UserSummary(BaseModel):
    """Public author information embedded in posts, comments and notifications."""

    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Account information returned to the user themselves and to admins."""

    id: int
    username: str
    email: str
    role: str
    is_active: bool
    is_email_verified: bool
    last_login_at: UTCDateTime | None = None
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(Envelope):
    message: str | None = None
    user: UserResponse


class LoginResponse(Envelope):
    message: str = "Login successful"
    token: str = Field(..., description="JWT access token")
    token_type: str = "bearer"
    user: UserResponse


class RefreshResponse(Envelope):
    token: str = Field(..., description="New JWT access token")
    token_type: str = "bearer"


class UserListResponse(Envelope):
    users: list[UserResponse]
    pagination: Pagination


class RoleUpdateRequest(BaseModel):
    role: Literal["admin", "registered"]


class StatusUpdateRequest(BaseModel):
    is_active: bool = Field(..., validation_alias=AliasChoices("is_active", "isActive"))

