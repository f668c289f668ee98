"""FastAPI dependencies for configuration, authentication and uploads."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, UploadFile, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from postboard.config import Settings
from postboard.database import get_db
from postboard.schemas.auth import TokenIdentity
from postboard.services.auth import decode_access_token
from postboard.services.posts import PostService
from postboard.services.uploads import InvalidUploadError, save_upload

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenIdentity:
    """Get the identity of the caller from the bearer token.

    A missing token is 401; a token that fails verification is 403.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    identity = decode_access_token(credentials.credentials, settings)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )
    return identity


def get_post_service(
    db: Annotated[Session, Depends(get_db)],
) -> PostService:
    """Get post service with dependencies."""
    return PostService(db)


async def store_image(file: UploadFile | None, settings: Settings) -> str | None:
    """Store an optional uploaded image and return its public path."""
    if file is None or not file.filename:
        return None
    try:
        return await save_upload(file, settings)
    except InvalidUploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except OSError:
        logger.exception("Failed to store uploaded file")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not store uploaded file",
        ) from None
    finally:
        await file.close()
