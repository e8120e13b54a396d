from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True, slots=True)
class ResetTokenExpiryPolicy:
    """Defines when a password reset token is too old to be consumed.

    Semantics:
    - The token's age is the distance between its creation time and ``as_of``.
    - A token is expired once the magnitude of that age exceeds ``window``.

    Note: the boundary is inclusive. A token exactly ``window`` old is still valid.
    Expiry is evaluated lazily at consumption time; nothing sweeps old rows.
    """

    window: timedelta

    def age(self, *, created_at: datetime, as_of: datetime) -> timedelta:
        return as_utc(as_of) - as_utc(created_at)

    def is_expired(self, *, created_at: datetime, as_of: datetime) -> bool:
        return abs(self.age(created_at=created_at, as_of=as_of)) > self.window

    @classmethod
    def from_minutes(cls, minutes: int) -> "ResetTokenExpiryPolicy":
        return cls(window=timedelta(minutes=minutes))
