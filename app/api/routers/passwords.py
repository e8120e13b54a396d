from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.user import PasswordReset, PasswordResetRequest
from app.services.password import (
    deliver_password_reset_email,
    request_password_reset,
    reset_password,
)

router = APIRouter(tags=["passwords"])


@router.post("/forgot-password", status_code=status.HTTP_204_NO_CONTENT)
def forgot_password(
    request: PasswordResetRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Request a password reset.

    The email carrying ``reset_password_url?token=...`` is sent after the
    response; a mail failure never turns into an error for the caller.
    """
    user, reset_url = request_password_reset(db, request.email, request.reset_password_url)
    background_tasks.add_task(
        deliver_password_reset_email, user.email, user.username, reset_url
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/reset-password", status_code=status.HTTP_204_NO_CONTENT)
def reset_password_with_token(reset_data: PasswordReset, db: Session = Depends(get_db)):
    """Reset password using the token from the email. Each token works once."""
    reset_password(db, reset_data.token, reset_data.password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
