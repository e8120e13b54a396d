"""Password reset: token issuance, mail notification, and token consumption."""

import logging
from datetime import datetime, timezone

import aiosmtplib
from sqlalchemy.orm import Session

import app.repositories.password_reset_token as reset_token_repo
from app.core.config import settings
from app.core.security import generate_token, get_password_hash
from app.db.models.user import User as UserModel
from app.domain.reset_token_expiry import ResetTokenExpiryPolicy
from app.errors import NotFoundError, TokenExpiredError
from app.repositories.user import get_user_by_email, get_user_by_id
from app.services.email import send_password_reset_email

logger = logging.getLogger(__name__)


def build_reset_url(reset_password_url: str, token: str) -> str:
    return f"{reset_password_url}?token={token}"


def request_password_reset(
    db: Session, email: str, reset_password_url: str
) -> tuple[UserModel, str]:
    """
    Issue a fresh reset token for the user, replacing any previous one.

    Returns the user and the callback URL carrying the token; the caller is
    responsible for dispatching the email.

    Raises:
        NotFoundError: If no user has this email.
    """
    user = get_user_by_email(db, email)
    if not user:
        raise NotFoundError("User not found")

    token = generate_token()
    reset_token_repo.upsert_token(db, user.id, token)
    logger.info("Password reset token issued for user %s", user.id)
    return user, build_reset_url(reset_password_url, token)


async def deliver_password_reset_email(email: str, username: str, reset_url: str) -> None:
    """
    Background task sending the reset email.

    Dispatch failures are logged, never raised; the token stays valid.
    """
    try:
        await send_password_reset_email(email, username, reset_url)
    except (ValueError, aiosmtplib.SMTPException, OSError) as e:
        logger.error("Failed to send password reset email: %s", e)


def reset_password(
    db: Session, token: str, new_password: str, now: datetime | None = None
) -> UserModel:
    """
    Reset a password using a token from the email.

    Raises:
        NotFoundError: If the token does not exist (including after it was used).
        TokenExpiredError: If the token is older than the configured window. The
            token is kept, so further attempts keep failing the same way.
    """
    reset_token = reset_token_repo.get_token(db, token)
    if not reset_token:
        raise NotFoundError("token not found")

    policy = ResetTokenExpiryPolicy.from_minutes(settings.password_reset_token_expire_minutes)
    if policy.is_expired(
        created_at=reset_token.created_at, as_of=now or datetime.now(timezone.utc)
    ):
        raise TokenExpiredError()

    user = get_user_by_id(db, reset_token.user_id)
    if not user:
        raise NotFoundError("User not found")

    return reset_token_repo.consume_token(
        db, reset_token, user, get_password_hash(new_password)
    )
