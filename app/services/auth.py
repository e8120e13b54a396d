"""Auth service: session creation, revocation, and bearer token resolution."""

import logging

from sqlalchemy.orm import Session

import app.repositories.api_token as api_token_repo
from app.core.security import verify_password
from app.db.models.user import User as UserModel
from app.errors import BadRequestError, UnauthorizedError
from app.repositories.user import get_user_by_email
from app.schemas.user import Token, User

logger = logging.getLogger(__name__)


def create_session(db: Session, email: str | None, password: str | None) -> Token:
    """
    Authenticate user by email and password, return an opaque bearer token.

    Raises:
        BadRequestError: If credentials are missing, email not found or password incorrect.
            The message is identical in every case.
    """
    if not email or not password:
        raise BadRequestError("invalid credentials")

    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise BadRequestError("invalid credentials")

    token = api_token_repo.create_token(db, user.id)
    logger.info("Session created for user %s", user.id)
    return Token(token=token, token_type="bearer", user=User.model_validate(user))


def revoke_session(db: Session, token: str | None) -> None:
    """Delete the session behind ``token``. Unknown or missing tokens are ignored."""
    if not token:
        return
    if api_token_repo.delete_token(db, token):
        logger.info("Session revoked")


def authenticate(db: Session, token: str | None) -> UserModel:
    """
    Resolve a bearer token to its user.

    Raises:
        UnauthorizedError: If the token is missing or has no live session.
    """
    if not token:
        raise UnauthorizedError("Not authenticated")
    user = api_token_repo.get_user_by_token(db, token)
    if user is None:
        raise UnauthorizedError("Could not validate credentials")
    return user
