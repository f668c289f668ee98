"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field


class UserRegister(BaseModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=72)
    name: str = Field(..., min_length=1, max_length=255)


class UserLogin(BaseModel):
    """User login request."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class TokenResponse(BaseModel):
    """JWT token response."""

    token: str
    token_type: str = "bearer"  # noqa: S105


class TokenIdentity(BaseModel):
    """Identity decoded from a verified access token."""

    id: int
    email: str


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
