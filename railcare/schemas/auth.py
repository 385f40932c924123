"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, EmailStr, Field

from railcare.schemas.common import Role
from railcare.schemas.user import UserOut


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Account e-mail")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class SignupRequest(BaseModel):
    """Self-service registration; always creates a Public account."""

    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserOut


class CurrentUser(BaseModel):
    """Authenticated user for dependency injection."""

    id: int
    name: str
    email: str
    role: Role
    station_id: int | None = None

    class Config:
        from_attributes = True
