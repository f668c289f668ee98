"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from postboard.config import Settings
from postboard.models.user import User
from postboard.schemas.auth import TokenIdentity

logger = logging.getLogger(__name__)


@lru_cache
def get_pwd_context(rounds: int) -> CryptContext:
    """Password hashing context for the configured bcrypt cost."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def verify_password(plain_password: str, hashed_password: str, settings: Settings) -> bool:
    """Verify a password against its hash."""
    return get_pwd_context(settings.bcrypt_rounds).verify(plain_password, hashed_password)


def get_password_hash(password: str, settings: Settings) -> str:
    """Hash a password."""
    return get_pwd_context(settings.bcrypt_rounds).hash(password)


def create_access_token(
    user_id: int, email: str, settings: Settings, issued_at: datetime | None = None
) -> str:
    """Create a JWT access token."""
    issued_at = issued_at or datetime.now(UTC)
    expire = issued_at + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> TokenIdentity | None:
    """Decode and validate a JWT token.

    Returns None when the signature, expiry or claims are invalid.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    if user_id is None or email is None:
        return None
    try:
        return TokenIdentity(id=int(user_id), email=email)
    except ValueError:
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, email: str, password: str, name: str, settings: Settings) -> User:
    """Create a new user.

    Email uniqueness is enforced by the table constraint, so a duplicate
    surfaces as an IntegrityError from the commit.
    """
    user = User(email=email, password_hash=get_password_hash(password, settings), name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user
