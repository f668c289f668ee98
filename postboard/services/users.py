"""Profile access for the authenticated user."""

from sqlalchemy.orm import Session

from postboard.models.user import User


def get_user(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def update_profile(
    db: Session,
    user_id: int,
    name: str,
    email: str,
    number: str | None = None,
    picture: str | None = None,
) -> bool:
    """Apply a partial profile update in a single statement.

    Name and email are always written; number and picture only when supplied.
    Returns False if the user no longer exists. An email already used by
    another account raises IntegrityError from the commit.
    """
    values: dict[str, str] = {"name": name, "email": email}
    if number:
        values["number"] = number
    if picture:
        values["picture"] = picture

    updated = (
        db.query(User)
        .filter(User.id == user_id)
        .update(values, synchronize_session=False)
    )
    db.commit()
    return updated > 0
