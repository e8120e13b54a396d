from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.password_reset_token import PasswordResetToken as PasswordResetTokenModel
from app.db.models.user import User as UserModel


def get_token(db: Session, token: str) -> PasswordResetTokenModel | None:
    """Get a reset token row by its value, regardless of age."""
    return (
        db.query(PasswordResetTokenModel)
        .filter(PasswordResetTokenModel.token == token)
        .first()
    )


def get_token_for_user(db: Session, user_id: int) -> PasswordResetTokenModel | None:
    return (
        db.query(PasswordResetTokenModel)
        .filter(PasswordResetTokenModel.user_id == user_id)
        .first()
    )


def upsert_token(
    db: Session, user_id: int, token: str, created_at: datetime | None = None
) -> PasswordResetTokenModel:
    """
    Store ``token`` as the user's only reset token.

    Updates the existing row when there is one, otherwise inserts. A concurrent
    insert for the same user trips the unique constraint on user_id; in that case
    the freshly committed row is overwritten instead.
    """
    created_at = created_at or datetime.now(timezone.utc)

    row = get_token_for_user(db, user_id)
    if row is None:
        row = PasswordResetTokenModel(user_id=user_id, token=token, created_at=created_at)
        db.add(row)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            row = get_token_for_user(db, user_id)
            if row is None:
                raise
            row.token = token
            row.created_at = created_at
            db.commit()
    else:
        row.token = token
        row.created_at = created_at
        db.commit()

    db.refresh(row)
    return row


def consume_token(
    db: Session, reset_token: PasswordResetTokenModel, user: UserModel, password_hash: str
) -> UserModel:
    """Set the user's new password and delete the token in a single commit."""
    try:
        user.password_hash = password_hash
        db.delete(reset_token)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user
