"""Post API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from postboard.api.dependencies import (
    get_app_settings,
    get_current_identity,
    get_post_service,
    store_image,
)
from postboard.config import Settings
from postboard.schemas.auth import MessageResponse, TokenIdentity
from postboard.schemas.post import PostCreateResponse, PostResponse, PostUpdate
from postboard.services.posts import PostService
from postboard.services.uploads import discard_upload

router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.post("", response_model=PostCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    title: Annotated[str, Form(min_length=1, max_length=255)],
    content: Annotated[str, Form(min_length=1, max_length=20000)],
    identity: Annotated[TokenIdentity, Depends(get_current_identity)],
    service: Annotated[PostService, Depends(get_post_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    image: Annotated[UploadFile | None, File(description="Optional post image")] = None,
):
    """Create a post, optionally with an attached image.

    Note: This endpoint must remain async because UploadFile.read() is async,
    so the database write is pushed to the threadpool.
    """
    image_url = await store_image(image, settings)
    try:
        post = await run_in_threadpool(service.create, identity, title, content, image_url)
    except SQLAlchemyError:
        service.db.rollback()
        await run_in_threadpool(discard_upload, image_url, settings)
        raise
    return PostCreateResponse.model_validate(post)


@router.get("", response_model=list[PostResponse])
def list_posts(
    identity: Annotated[TokenIdentity, Depends(get_current_identity)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Get all posts owned by the current user."""
    return service.list_for_owner(identity.id)


@router.put("/{post_id}", response_model=MessageResponse)
def update_post(
    post_id: int,
    post_data: PostUpdate,
    identity: Annotated[TokenIdentity, Depends(get_current_identity)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Update the title and content of a post (owner only)."""
    if not service.update(post_id, identity.id, post_data.title, post_data.content):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to edit this post",
        )
    return MessageResponse(message="Post updated successfully")


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: int,
    identity: Annotated[TokenIdentity, Depends(get_current_identity)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Delete a post (owner only)."""
    if not service.delete(post_id, identity.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to delete this post",
        )
    return MessageResponse(message="Post deleted successfully")
