"""Error taxonomy surfaced by the food lookup core."""

from enum import StrEnum


class FoodApiErrorKind(StrEnum):
    """Closed set of failure kinds for food API operations."""

    INVALID_URL = "invalid_url"
    AUTHENTICATION_FAILED = "authentication_failed"
    INVALID_RESPONSE = "invalid_response"
    NETWORK_ERROR = "network_error"
    CANCELLED = "cancelled"


_DESCRIPTIONS = {
    FoodApiErrorKind.INVALID_URL: "Invalid URL",
    FoodApiErrorKind.AUTHENTICATION_FAILED: "Failed to authenticate with FatSecret API",
    FoodApiErrorKind.INVALID_RESPONSE: "Invalid response from server",
    FoodApiErrorKind.NETWORK_ERROR: "Network error occurred",
    FoodApiErrorKind.CANCELLED: "Request was cancelled",
}


class FoodApiError(Exception):
    """Single error type raised by the token manager and lookup client."""

    def __init__(self, kind: FoodApiErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or _DESCRIPTIONS[kind]
        super().__init__(self.message)

    @property
    def description(self) -> str:
        """User-facing description of the failure kind."""
        return _DESCRIPTIONS[self.kind]

    def __repr__(self) -> str:
        return f"FoodApiError(kind={self.kind.value!r}, message={self.message!r})"
