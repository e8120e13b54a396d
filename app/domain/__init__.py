"""Domain-level policies and business rules.

This package contains logic that defines *what* the business rules are,
independent from *where* they are applied (services, repositories, etc.).
"""

from app.domain.group_request_status import GroupRequestStatus, can_transition
from app.domain.reset_token_expiry import ResetTokenExpiryPolicy

__all__ = ["GroupRequestStatus", "ResetTokenExpiryPolicy", "can_transition"]
