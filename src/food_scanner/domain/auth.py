"""Bearer credential model."""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class Credential:
    """Access token obtained from a client-credentials exchange."""

    access_token: str
    token_type: str | None = None
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.access_token:
            raise ValueError("access_token must not be empty")

    def is_expired(self, now: datetime, margin_seconds: float = 0) -> bool:
        """Return whether the token should be refreshed at ``now``.

        Credentials without a known expiry never expire.
        """
        if self.expires_at is None:
            return False
        return now >= self.expires_at - timedelta(seconds=margin_seconds)

    def __repr__(self) -> str:
        return (
            f"Credential(access_token='***', token_type={self.token_type!r}, "
            f"expires_at={self.expires_at!r})"
        )
