"""Account schemas."""

from pydantic import BaseModel, ConfigDict


class AccountResponse(BaseModel):
    """Profile of the authenticated user."""

    model_config = ConfigDict(from_attributes=True)

    email: str
    name: str | None
    picture: str | None
    number: str | None
