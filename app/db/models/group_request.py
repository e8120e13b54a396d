from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, func, text
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.domain.group_request_status import GroupRequestStatus


class GroupRequest(Base):
    __tablename__ = "group_requests"
    __table_args__ = (
        # At most one PENDING request per (user, group)
        Index(
            "uq_group_requests_pending_user_group",
            "user_id",
            "group_id",
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=GroupRequestStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    user = relationship("User")
    group = relationship("Group", back_populates="requests")
