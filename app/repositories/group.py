from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from app.db.models.group import Group as GroupModel, groups_users
from app.db.models.user import User as UserModel
from app.errors import NotFoundError


def escape_like(text: str) -> str:
    """Make ``%`` and ``_`` match literally in a LIKE pattern escaped with a backslash."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_group_by_id(db: Session, group_id: int) -> GroupModel | None:
    """Get a group by ID, with its master and roster loaded."""
    return (
        db.query(GroupModel)
        .options(joinedload(GroupModel.master_user), selectinload(GroupModel.players))
        .filter(GroupModel.id == group_id)
        .first()
    )


def create_group(
    db: Session,
    master: UserModel,
    name: str,
    description: str,
    schedule: str,
    location: str,
    chronic: str,
) -> GroupModel:
    """Create a group with ``master`` as its owner and first player."""
    db_group = GroupModel(
        name=name,
        description=description,
        schedule=schedule,
        location=location,
        chronic=chronic,
        master=master.id,
    )
    db_group.players.append(master)
    db.add(db_group)
    db.commit()
    db.refresh(db_group)
    return db_group


def update_group(
    db: Session,
    group_id: int,
    name: str | None = None,
    description: str | None = None,
    schedule: str | None = None,
    location: str | None = None,
    chronic: str | None = None,
) -> GroupModel:
    """Update group text fields. The master is not updatable here."""
    group = get_group_by_id(db, group_id)
    if not group:
        raise NotFoundError("Group not found")

    if name is not None:
        group.name = name
    if description is not None:
        group.description = description
    if schedule is not None:
        group.schedule = schedule
    if location is not None:
        group.location = location
    if chronic is not None:
        group.chronic = chronic

    db.commit()
    db.refresh(group)
    return group


def delete_group(db: Session, group: GroupModel) -> None:
    """Delete a group along with its roster rows and join requests."""
    db.delete(group)
    db.commit()


def is_player(db: Session, group_id: int, user_id: int) -> bool:
    return (
        db.query(groups_users)
        .filter(groups_users.c.group_id == group_id, groups_users.c.user_id == user_id)
        .first()
        is not None
    )


def remove_player(db: Session, group: GroupModel, user_id: int) -> bool:
    """Remove a user from the roster. Returns False when they were not on it."""
    player = next((p for p in group.players if p.id == user_id), None)
    if player is None:
        return False
    group.players.remove(player)
    db.commit()
    return True


def get_groups_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    user_id: int | None = None,
    text: str | None = None,
) -> tuple[list[GroupModel], int]:
    """
    Get groups with pagination, sorted by ID for stable pagination.

    Args:
        user_id: Only groups whose roster contains this user
        text: Case-insensitive substring matched against name OR description

    Returns:
        Tuple of (list of groups, total count)
    """
    query = db.query(GroupModel)
    if user_id is not None:
        roster = (
            db.query(groups_users.c.group_id)
            .filter(groups_users.c.user_id == user_id)
        )
        query = query.filter(GroupModel.id.in_(roster))
    if text:
        pattern = f"%{escape_like(text)}%"
        query = query.filter(
            or_(
                GroupModel.name.ilike(pattern, escape="\\"),
                GroupModel.description.ilike(pattern, escape="\\"),
            )
        )

    total = query.count()
    skip = (page - 1) * page_size
    groups = (
        query.options(joinedload(GroupModel.master_user), selectinload(GroupModel.players))
        .order_by(GroupModel.id)
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return groups, total
