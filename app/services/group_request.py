"""Join-request workflow: request, list, accept and reject group membership."""

import logging

from sqlalchemy.orm import Session

import app.repositories.group as group_repo
import app.repositories.group_request as group_request_repo
from app.db.models.group_request import GroupRequest as GroupRequestModel
from app.db.models.user import User as UserModel
from app.domain.group_request_status import GroupRequestStatus, can_transition
from app.errors import (
    DomainValidationError,
    DuplicateResourceError,
    ForbiddenError,
    NotFoundError,
)
from app.services.group import ensure_master, get_group

logger = logging.getLogger(__name__)


def _get_request(db: Session, group_id: int, request_id: int) -> GroupRequestModel:
    request = group_request_repo.get_request_in_group(db, group_id, request_id)
    if not request:
        raise NotFoundError("Group request not found")
    return request


def _ensure_transition(request: GroupRequestModel, target: GroupRequestStatus) -> None:
    if not can_transition(request.status, target):
        raise DomainValidationError(f"group request is already {request.status.lower()}")


def create_request(db: Session, group_id: int, requester: UserModel) -> GroupRequestModel:
    """
    Ask to join a group.

    Raises:
        NotFoundError: If the group doesn't exist
        DuplicateResourceError: If a PENDING request already exists for this user and group
        DomainValidationError: If the user is already on the roster (masters included)
    """
    group = get_group(db, group_id)

    if group_request_repo.get_pending_request(db, group.id, requester.id):
        raise DuplicateResourceError("group request already exists")

    if group_repo.is_player(db, group.id, requester.id):
        raise DomainValidationError("user is already in the group")

    request = group_request_repo.create_request(db, group.id, requester.id)
    logger.info("User %s requested to join group %s", requester.id, group.id)
    return request


def list_requests(db: Session, group_id: int, master_id: int) -> list[GroupRequestModel]:
    """PENDING requests of the group, empty unless ``master_id`` is its actual master."""
    return group_request_repo.list_pending_requests_for_master(db, group_id, master_id)


def accept_request(
    db: Session, group_id: int, request_id: int, current_user: UserModel
) -> GroupRequestModel:
    """
    Accept a PENDING request, adding the requester to the roster.

    Raises:
        NotFoundError: If the group or the request doesn't exist, or the request
            belongs to another group
        ForbiddenError: If the caller is not the group master
        DomainValidationError: If the request is no longer PENDING
    """
    group = get_group(db, group_id)
    request = _get_request(db, group.id, request_id)
    ensure_master(group, current_user, "accept group requests")
    _ensure_transition(request, GroupRequestStatus.ACCEPTED)

    accepted = group_request_repo.accept_request(db, request, group, request.user)
    logger.info("Group request %s accepted into group %s", request_id, group_id)
    return accepted


def reject_request(
    db: Session, group_id: int, request_id: int, current_user: UserModel
) -> None:
    """
    Reject a PENDING request (master) or cancel it (requester) by deleting it.

    Raises:
        NotFoundError: If the group or the request doesn't exist, or the request
            belongs to another group
        ForbiddenError: If the caller is neither the group master nor the requester
        DomainValidationError: If the request is no longer PENDING
    """
    group = get_group(db, group_id)
    request = _get_request(db, group.id, request_id)
    if current_user.id not in (group.master, request.user_id):
        raise ForbiddenError("Only the group master or the requester can reject a group request")
    _ensure_transition(request, GroupRequestStatus.REMOVED)

    group_request_repo.delete_request(db, request)
    logger.info("Group request %s removed from group %s", request_id, group_id)
