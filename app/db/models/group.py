from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text, func
from sqlalchemy.orm import relationship

from app.db.base import Base

# Roster: which users play in which group
groups_users = Table(
    "groups_users",
    Base.metadata,
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    schedule = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    chronic = Column(Text, nullable=False)
    master = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    master_user = relationship("User", foreign_keys=[master])
    players = relationship("User", secondary=groups_users, order_by="User.id")
    requests = relationship(
        "GroupRequest",
        back_populates="group",
        cascade="all, delete-orphan",
    )
