"""Post schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PostUpdate(BaseModel):
    """Replace the title and content of a post."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=20000)


class PostResponse(BaseModel):
    """Post response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    author: str
    image_url: str | None
    user_id: int


class PostCreateResponse(PostResponse):
    """Created post with a confirmation message."""

    message: str = "Post created successfully"
