from __future__ import annotations

from enum import Enum


class GroupRequestStatus(str, Enum):
    """Lifecycle of a request to join a group.

    A request starts as PENDING. The group's master either accepts it
    (ACCEPTED, the row is kept as history) or it is rejected/cancelled,
    which deletes the row. REMOVED is never persisted; it names the
    terminal state reached by deletion so transitions can be checked
    uniformly.
    """

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REMOVED = "REMOVED"


ALLOWED_TRANSITIONS: dict[GroupRequestStatus, frozenset[GroupRequestStatus]] = {
    GroupRequestStatus.PENDING: frozenset(
        {GroupRequestStatus.ACCEPTED, GroupRequestStatus.REMOVED}
    ),
    GroupRequestStatus.ACCEPTED: frozenset(),
    GroupRequestStatus.REMOVED: frozenset(),
}


def can_transition(current: GroupRequestStatus | str, target: GroupRequestStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[GroupRequestStatus(current)]
