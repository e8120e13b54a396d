import logging

from sqlalchemy.orm import Session

import app.repositories.group as group_repo
from app.db.models.group import Group as GroupModel
from app.db.models.user import User as UserModel
from app.errors import BadRequestError, ForbiddenError, NotFoundError
from app.schemas.group import GroupCreate, GroupUpdate

logger = logging.getLogger(__name__)


def get_group(db: Session, group_id: int) -> GroupModel:
    """
    Raises:
        NotFoundError: If the group doesn't exist
    """
    group = group_repo.get_group_by_id(db, group_id)
    if not group:
        raise NotFoundError("Group not found")
    return group


def ensure_master(group: GroupModel, current_user: UserModel, action: str) -> None:
    if group.master != current_user.id:
        raise ForbiddenError(f"Only the group master can {action}")


def create_group(db: Session, master: UserModel, group_data: GroupCreate) -> GroupModel:
    """Create a group owned by ``master``, who also becomes its first player."""
    group = group_repo.create_group(
        db,
        master=master,
        name=group_data.name,
        description=group_data.description,
        schedule=group_data.schedule,
        location=group_data.location,
        chronic=group_data.chronic,
    )
    logger.info("Group %s created by user %s", group.id, master.id)
    return group


def update_group(
    db: Session, group_id: int, group_data: GroupUpdate, current_user: UserModel
) -> GroupModel:
    """
    Update a group's text fields.

    Raises:
        NotFoundError: If the group doesn't exist
        ForbiddenError: If the caller is not the group master
    """
    group = get_group(db, group_id)
    ensure_master(group, current_user, "update the group")
    return group_repo.update_group(
        db,
        group_id=group_id,
        name=group_data.name,
        description=group_data.description,
        schedule=group_data.schedule,
        location=group_data.location,
        chronic=group_data.chronic,
    )


def delete_group(db: Session, group_id: int, current_user: UserModel) -> None:
    """
    Delete a group, its roster and its join requests.

    Raises:
        NotFoundError: If the group doesn't exist
        ForbiddenError: If the caller is not the group master
    """
    group = get_group(db, group_id)
    ensure_master(group, current_user, "delete the group")
    group_repo.delete_group(db, group)
    logger.info("Group %s deleted", group_id)


def list_groups(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    user_id: int | None = None,
    text: str | None = None,
) -> tuple[list[GroupModel], int]:
    """
    List groups, optionally restricted to a player's groups and/or a text search.

    Both filters combine with AND.
    """
    return group_repo.get_groups_paginated(
        db, page=page, page_size=page_size, user_id=user_id, text=text
    )


def remove_player(
    db: Session, group_id: int, user_id: int, current_user: UserModel
) -> None:
    """
    Remove a player from a group's roster.

    Removing a user who is not on the roster is a no-op.

    Raises:
        NotFoundError: If the group doesn't exist
        ForbiddenError: If the caller is not the group master
        BadRequestError: If ``user_id`` is the group master
    """
    group = get_group(db, group_id)
    ensure_master(group, current_user, "remove players")
    if user_id == group.master:
        raise BadRequestError("the group master cannot be removed from the group")
    if group_repo.remove_player(db, group, user_id):
        logger.info("User %s removed from group %s", user_id, group_id)
