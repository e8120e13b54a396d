from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, oauth2_scheme
from app.db.models.user import User as UserModel
from app.schemas.user import SessionCreate, Token, User
from app.services.auth import create_session, revoke_session

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=Token, status_code=status.HTTP_201_CREATED)
def login(credentials: SessionCreate, db: Session = Depends(get_db)):
    """Login endpoint - returns the user and an opaque bearer token."""
    return create_session(db, credentials.email, credentials.password)


@router.delete("")
def logout(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """Revoke the presented bearer token. Succeeds even if it is unknown."""
    revoke_session(db, token)
    return {"message": "Signed out"}


@router.get("/me", response_model=User)
def get_current_user_info(current_user: UserModel = Depends(get_current_user)):
    """Get current authenticated user information."""
    return User.model_validate(current_user)
