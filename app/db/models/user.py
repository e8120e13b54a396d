from sqlalchemy import Column, DateTime, Integer, String, func

from app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(320), unique=True, nullable=False, index=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    avatar = Column(String(2048), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
