from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl


class User(BaseModel):
    """Public profile. The password hash is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    avatar: str | None = None


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8)
    avatar: HttpUrl | None = None


class UserUpdate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    avatar: HttpUrl | None = None


class SessionCreate(BaseModel):
    # Missing credentials are rejected by the session service with a 400
    email: str | None = None
    password: str | None = None


class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    user: User


class PasswordResetRequest(BaseModel):
    email: EmailStr
    reset_password_url: str = Field(..., min_length=1)


class PasswordReset(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)
