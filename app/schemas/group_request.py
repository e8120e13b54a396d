from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.domain.group_request_status import GroupRequestStatus
from app.schemas.group import GroupSummary
from app.schemas.user import User


class GroupRequest(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    group_id: int
    status: GroupRequestStatus
    created_at: datetime | None = None


class GroupRequestDetail(GroupRequest):
    """Join request as listed to a group master, with requester and group attached."""

    user: User
    group: GroupSummary
