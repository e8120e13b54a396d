from sqlalchemy.orm import Session

from app.core.security import generate_session_token, hash_session_token
from app.db.models.api_token import ApiToken as ApiTokenModel
from app.db.models.user import User as UserModel


def create_token(db: Session, user_id: int) -> str:
    """Persist a new session for the user and return the raw bearer value."""
    raw_token = generate_session_token()
    db.add(ApiTokenModel(user_id=user_id, token_hash=hash_session_token(raw_token)))
    db.commit()
    return raw_token


def get_user_by_token(db: Session, token: str) -> UserModel | None:
    """Resolve a raw bearer value to its user, if the session still exists."""
    return (
        db.query(UserModel)
        .join(ApiTokenModel, ApiTokenModel.user_id == UserModel.id)
        .filter(ApiTokenModel.token_hash == hash_session_token(token))
        .first()
    )


def delete_token(db: Session, token: str) -> bool:
    """Delete the session behind a raw bearer value. Returns whether a row was removed."""
    deleted = (
        db.query(ApiTokenModel)
        .filter(ApiTokenModel.token_hash == hash_session_token(token))
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
