"""Post model."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from postboard.database import Base
from postboard.models.mixins import TimestampMixin


class Post(Base, TimestampMixin):
    """Post authored by a single owning user."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    author = Column(String(255), nullable=False)  # owner's email when the post was created
    image_url = Column(String(500), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", backref="posts")
