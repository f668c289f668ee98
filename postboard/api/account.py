"""Profile and account API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import EmailStr
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from postboard.api.dependencies import get_app_settings, get_current_identity, store_image
from postboard.config import Settings
from postboard.database import get_db
from postboard.schemas.account import AccountResponse
from postboard.schemas.auth import MessageResponse, TokenIdentity
from postboard.services.uploads import discard_upload
from postboard.services.users import get_user, update_profile

router = APIRouter(tags=["account"])


@router.post("/updateProfile", response_model=MessageResponse)
async def update_profile_endpoint(
    name: Annotated[str, Form(min_length=1, max_length=255)],
    email: Annotated[EmailStr, Form(max_length=255)],
    identity: Annotated[TokenIdentity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    number: Annotated[str | None, Form(max_length=50)] = None,
    profile_picture: Annotated[UploadFile | None, File(alias="profilePicture")] = None,
):
    """Update the current user's profile.

    Number and picture are only changed when supplied. A picture stored for
    a request that then fails is removed again.
    """
    picture = await store_image(profile_picture, settings)

    try:
        found = await run_in_threadpool(
            update_profile, db, identity.id, name, email, number=number, picture=picture
        )
    except SQLAlchemyError as e:
        db.rollback()
        await run_in_threadpool(discard_upload, picture, settings)
        if isinstance(e, IntegrityError):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            ) from None
        raise

    if not found:
        await run_in_threadpool(discard_upload, picture, settings)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return MessageResponse(message="Profile updated successfully")


@router.get("/account", response_model=AccountResponse)
def get_account(
    identity: Annotated[TokenIdentity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the current user's profile."""
    user = get_user(db, identity.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
