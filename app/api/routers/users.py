from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.db.models.user import User as UserModel
from app.schemas.user import User, UserCreate, UserUpdate
from app.services.user import create_user, update_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def create_new_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user. Open to anonymous callers.

    Email and username must both be unused.
    """
    user = create_user(db, user_data)
    return User.model_validate(user)


@router.put("/{user_id}", response_model=User)
def update_user_by_id(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Update a user's email, password and avatar.

    Users can only update themselves.
    """
    user = update_user(db, user_id, user_data, current_user)
    return User.model_validate(user)
