"""Authentication request and response schemas."""

from typing import Optional

from pydantic import EmailStr, Field

from halolight.schemas.base import BaseSchema
from halolight.users.schemas import UserWithRoles


class RegisterRequest(BaseSchema):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)


class LoginRequest(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseSchema):
    refresh_token: str = Field(..., min_length=1)


class AuthResponse(BaseSchema):
    """Returned by register and login."""
    user: UserWithRoles
    token: str
    refresh_token: str
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class RefreshResponse(BaseSchema):
    token: str
    refresh_token: str
    expires_in: int = Field(..., description="Access token lifetime in seconds")
