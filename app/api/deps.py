from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.db import SessionLocal
from app.db.models.user import User
from app.errors import UnauthorizedError
from app.services.auth import authenticate

# auto_error=False: logout must accept a missing or stale token without failing
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/sessions", auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Get the current authenticated user from the session bearer token."""
    try:
        return authenticate(db, token)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
