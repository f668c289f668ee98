"""User model."""

from sqlalchemy import Column, Integer, String

from postboard.database import Base
from postboard.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication, profile data and post ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    number = Column(String(50), nullable=True)  # phone number
    picture = Column(String(500), nullable=True)  # public upload path
