"""Pydantic schemas for API requests and responses."""

from postboard.schemas.account import AccountResponse
from postboard.schemas.auth import (
    MessageResponse,
    TokenIdentity,
    TokenResponse,
    UserLogin,
    UserRegister,
)
from postboard.schemas.post import PostCreateResponse, PostResponse, PostUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "TokenResponse",
    "TokenIdentity",
    "MessageResponse",
    "PostUpdate",
    "PostResponse",
    "PostCreateResponse",
    "AccountResponse",
]
