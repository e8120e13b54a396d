from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import User


class Group(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    schedule: str
    location: str
    chronic: str
    master: int
    master_user: User
    players: list[User]


class GroupSummary(BaseModel):
    """Group fields embedded in a join request, without the roster."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    master: int


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    schedule: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    chronic: str = Field(..., min_length=1)


class GroupUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    schedule: str | None = Field(None, min_length=1, max_length=255)
    location: str | None = Field(None, min_length=1, max_length=255)
    chronic: str | None = Field(None, min_length=1)
