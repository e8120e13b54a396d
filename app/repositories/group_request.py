from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.db.models.group import Group as GroupModel
from app.db.models.group_request import GroupRequest as GroupRequestModel
from app.db.models.user import User as UserModel
from app.domain.group_request_status import GroupRequestStatus
from app.errors import DomainValidationError, DuplicateResourceError


def get_request_in_group(
    db: Session, group_id: int, request_id: int
) -> GroupRequestModel | None:
    """Get a request by ID, only if it belongs to the given group."""
    return (
        db.query(GroupRequestModel)
        .filter(
            GroupRequestModel.id == request_id,
            GroupRequestModel.group_id == group_id,
        )
        .first()
    )


def get_pending_request(
    db: Session, group_id: int, user_id: int
) -> GroupRequestModel | None:
    return (
        db.query(GroupRequestModel)
        .filter(
            GroupRequestModel.group_id == group_id,
            GroupRequestModel.user_id == user_id,
            GroupRequestModel.status == GroupRequestStatus.PENDING.value,
        )
        .first()
    )


def create_request(db: Session, group_id: int, user_id: int) -> GroupRequestModel:
    """
    Insert a PENDING request.

    The partial unique index on (user_id, group_id) WHERE status = 'PENDING' is the
    final arbiter when two inserts race past the service-level check.
    """
    db_request = GroupRequestModel(
        group_id=group_id,
        user_id=user_id,
        status=GroupRequestStatus.PENDING.value,
    )
    db.add(db_request)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateResourceError("group request already exists") from e
    db.refresh(db_request)
    return db_request


def list_pending_requests_for_master(
    db: Session, group_id: int, master_id: int
) -> list[GroupRequestModel]:
    """PENDING requests of a group, only when that group's master is ``master_id``."""
    return (
        db.query(GroupRequestModel)
        .join(GroupModel, GroupModel.id == GroupRequestModel.group_id)
        .options(joinedload(GroupRequestModel.user), joinedload(GroupRequestModel.group))
        .filter(
            GroupRequestModel.group_id == group_id,
            GroupRequestModel.status == GroupRequestStatus.PENDING.value,
            GroupModel.master == master_id,
        )
        .order_by(GroupRequestModel.id)
        .all()
    )


def accept_request(
    db: Session, group_request: GroupRequestModel, group: GroupModel, requester: UserModel
) -> GroupRequestModel:
    """
    Mark the request ACCEPTED and add the requester to the roster in one commit.

    Raises:
        DomainValidationError: If a concurrent accept already put the requester
            on the roster.
    """
    try:
        group_request.status = GroupRequestStatus.ACCEPTED.value
        if all(player.id != requester.id for player in group.players):
            group.players.append(requester)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DomainValidationError("group request is already accepted") from e
    except Exception:
        db.rollback()
        raise
    db.refresh(group_request)
    return group_request


def delete_request(db: Session, group_request: GroupRequestModel) -> None:
    db.delete(group_request)
    db.commit()
