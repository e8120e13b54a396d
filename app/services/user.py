from sqlalchemy.orm import Session

import app.repositories.user as user_repo
from app.core.security import get_password_hash
from app.db.models.user import User as UserModel
from app.errors import DuplicateResourceError, ForbiddenError, NotFoundError
from app.schemas.user import UserCreate, UserUpdate


def create_user(db: Session, user_data: UserCreate) -> UserModel:
    """
    Register a new user.

    - Validates email uniqueness
    - Validates username uniqueness
    - Stores only the password hash

    Raises:
        DuplicateResourceError: If email or username is already in use
    """
    if user_repo.get_user_by_email(db, user_data.email):
        raise DuplicateResourceError("email already in use")

    if user_repo.get_user_by_username(db, user_data.username):
        raise DuplicateResourceError("username already in use")

    return user_repo.create_user(
        db,
        email=user_data.email,
        username=user_data.username,
        password_hash=get_password_hash(user_data.password),
        avatar=str(user_data.avatar) if user_data.avatar else None,
    )


def update_user(
    db: Session,
    user_id: int,
    user_data: UserUpdate,
    current_user: UserModel,
) -> UserModel:
    """
    Update a user's email, password and (optionally) avatar.

    Only the user themself may update their record.

    Raises:
        NotFoundError: If user doesn't exist
        ForbiddenError: If the caller is another user
        DuplicateResourceError: If email is already taken by another user
    """
    user = user_repo.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    if current_user.id != user.id:
        raise ForbiddenError("You can only update your own user information")

    if user_data.email != user.email:
        existing_user = user_repo.get_user_by_email(db, user_data.email)
        if existing_user:
            raise DuplicateResourceError("email already in use")

    return user_repo.update_user(
        db,
        user_id=user_id,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        avatar=str(user_data.avatar) if user_data.avatar else None,
    )
