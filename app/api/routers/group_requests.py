from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.db.models.user import User as UserModel
from app.schemas.group_request import GroupRequest, GroupRequestDetail
from app.services.group_request import (
    accept_request,
    create_request,
    list_requests,
    reject_request,
)

router = APIRouter(prefix="/groups/{group_id}/requests", tags=["group requests"])


@router.post("", response_model=GroupRequest, status_code=status.HTTP_201_CREATED)
def create_group_request(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """Ask to join a group as the current user."""
    group_request = create_request(db, group_id, current_user)
    return GroupRequest.model_validate(group_request)


@router.get("", response_model=list[GroupRequestDetail])
def get_group_requests(
    group_id: int,
    master: int = Query(..., description="ID of the group master"),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """List PENDING join requests of a group whose master is ``master``."""
    requests = list_requests(db, group_id, master)
    return [GroupRequestDetail.model_validate(request) for request in requests]


@router.post("/{request_id}/accept", response_model=GroupRequest)
def accept_group_request(
    group_id: int,
    request_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """Accept a join request. Master only."""
    group_request = accept_request(db, group_id, request_id, current_user)
    return GroupRequest.model_validate(group_request)


@router.delete("/{request_id}")
def reject_group_request(
    group_id: int,
    request_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """Reject (master) or cancel (requester) a join request."""
    reject_request(db, group_id, request_id, current_user)
    return {"message": "Group request removed"}
