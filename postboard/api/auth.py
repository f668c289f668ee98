"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from postboard.api.dependencies import get_app_settings, get_current_identity
from postboard.config import Settings
from postboard.database import get_db
from postboard.schemas.auth import (
    MessageResponse,
    TokenIdentity,
    TokenResponse,
    UserLogin,
    UserRegister,
)
from postboard.services.auth import (
    create_access_token,
    create_user,
    get_user_by_email,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Register a new user."""
    try:
        create_user(db, user_data.email, user_data.password, user_data.name, settings)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        ) from None

    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Login with email and password."""
    user = get_user_by_email(db, credentials.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if not verify_password(credentials.password, user.password_hash, settings):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"User {user.id} logged in")
    return TokenResponse(token=create_access_token(user.id, user.email, settings))


@router.post("/logout", response_model=MessageResponse)
def logout(
    identity: Annotated[TokenIdentity, Depends(get_current_identity)],
):
    """Logout (client should discard token)."""
    return MessageResponse(message="Logged out successfully")
