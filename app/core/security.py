import hashlib
import secrets

from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

RESET_TOKEN_BYTES = 24
SESSION_TOKEN_BYTES = 32


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def generate_token(nbytes: int = RESET_TOKEN_BYTES) -> str:
    """Return a random hex-encoded token carrying ``nbytes`` of entropy."""
    return secrets.token_hex(nbytes)


def generate_session_token() -> str:
    """Create an opaque bearer token for a new session."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def hash_session_token(token: str) -> str:
    """SHA-256 digest of a bearer token; only the digest is persisted."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
