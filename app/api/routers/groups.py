from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.db.models.user import User as UserModel
from app.schemas.group import Group, GroupCreate, GroupUpdate
from app.schemas.pagination import PaginatedResponse
from app.services.group import (
    create_group,
    delete_group,
    get_group,
    list_groups,
    remove_player,
    update_group,
)

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=Group, status_code=status.HTTP_201_CREATED)
def create_new_group(
    group_data: GroupCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """Create a group. The caller becomes its master and first player."""
    group = create_group(db, current_user, group_data)
    return Group.model_validate(group)


@router.get("", response_model=PaginatedResponse[Group])
def get_all_groups_paginated(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    user: int | None = Query(None, description="Only groups this user plays in"),
    text: str | None = Query(None, description="Search name or description (partial match)"),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """
    List groups with pagination.

    Filters combine: ``user`` restricts to that user's roster memberships and
    ``text`` matches name or description (case-insensitive partial match).
    """
    groups, total = list_groups(db, page=page, page_size=page_size, user_id=user, text=text)
    return PaginatedResponse.build(groups, Group.model_validate, total, page, page_size)


@router.get("/{group_id}", response_model=Group)
def get_group_by_id(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return Group.model_validate(get_group(db, group_id))


@router.patch("/{group_id}", response_model=Group)
def update_group_by_id(
    group_id: int,
    group_data: GroupUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """Update a group's text fields. Only the master can update; the master never changes."""
    group = update_group(db, group_id, group_data, current_user)
    return Group.model_validate(group)


@router.delete("/{group_id}")
def delete_group_by_id(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """Delete a group with its roster and join requests. Master only."""
    delete_group(db, group_id, current_user)
    return {"message": "Group deleted"}


@router.delete("/{group_id}/players/{user_id}")
def remove_player_from_group(
    group_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Remove a player from the roster. Master only.

    The master cannot be removed; removing a non-member is a no-op.
    """
    remove_player(db, group_id, user_id, current_user)
    return {"message": "Player removed"}
