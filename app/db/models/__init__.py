from app.db.models.user import User
from app.db.models.api_token import ApiToken
from app.db.models.password_reset_token import PasswordResetToken
from app.db.models.group import Group, groups_users
from app.db.models.group_request import GroupRequest

__all__ = ["User", "ApiToken", "PasswordResetToken", "Group", "GroupRequest", "groups_users"]
