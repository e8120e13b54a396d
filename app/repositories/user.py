from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.user import User as UserModel
from app.errors import NotFoundError


def get_user_by_email(db: Session, email: str) -> UserModel | None:
    """Get a user by email, ignoring case."""
    return (
        db.query(UserModel)
        .filter(func.lower(UserModel.email) == email.lower())
        .first()
    )


def get_user_by_username(db: Session, username: str) -> UserModel | None:
    """Get a user by username."""
    return db.query(UserModel).filter(UserModel.username == username).first()


def get_user_by_id(db: Session, user_id: int) -> UserModel | None:
    """Get a user by ID."""
    return db.query(UserModel).filter(UserModel.id == user_id).first()


def create_user(
    db: Session,
    email: str,
    username: str,
    password_hash: str,
    avatar: str | None = None,
) -> UserModel:
    """Create a new user in the database. Pure data access - no business logic."""
    db_user = UserModel(
        email=email,
        username=username,
        password_hash=password_hash,
        avatar=avatar,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(
    db: Session,
    user_id: int,
    email: str | None = None,
    password_hash: str | None = None,
    avatar: str | None = None,
) -> UserModel:
    """Update user fields. Only provided fields will be updated."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    if email is not None:
        user.email = email
    if password_hash is not None:
        user.password_hash = password_hash
    if avatar is not None:
        user.avatar = avatar

    db.commit()
    db.refresh(user)
    return user
