"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
BAD_REQUEST = "BAD_REQUEST"
UNAUTHORIZED = "UNAUTHORIZED"
FORBIDDEN = "FORBIDDEN"
TOKEN_EXPIRED = "TOKEN_EXPIRED"
INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules reject otherwise well-formed input (e.g. joining a group twice)."""

    pass


class BadRequestError(DomainError):
    """Raised for semantically invalid operations, such as removing a group's master or bad credentials."""

    pass


class UnauthorizedError(DomainError):
    """Raised when the caller is not authenticated."""

    pass


class ForbiddenError(DomainError):
    """Raised when the caller is authenticated but not allowed to act on the resource."""

    pass


class TokenExpiredError(DomainError):
    """Raised when a password reset token exists but is past its validity window."""

    def __init__(self, message: str = "token has expired"):
        super().__init__(message)
