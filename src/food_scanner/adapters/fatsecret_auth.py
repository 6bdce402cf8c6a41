"""FatSecret OAuth2 client-credentials token manager."""

import asyncio
import base64
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

import httpx
from pydantic import ValidationError

from food_scanner.app_logging import redact_headers
from food_scanner.domain.auth import Credential
from food_scanner.domain.errors import FoodApiError, FoodApiErrorKind
from food_scanner.domain.fatsecret import TokenResponse

DEFAULT_TOKEN_URL = "https://oauth.fatsecret.com/connect/token"
DEFAULT_SCOPE = "basic premier"

_logger = logging.getLogger(__name__)


class TokenManager(Protocol):
    """Interface for obtaining bearer credentials."""

    async def ensure_token(self, timeout: float | None = None) -> Credential:
        """Return a usable credential, authenticating if needed."""

    def invalidate(self) -> None:
        """Drop the cached credential."""


@dataclass
class HttpxTokenManager(TokenManager):
    """Token manager that performs the exchange with httpx.

    One credential is held per instance. Concurrent callers that find no
    usable credential share a single in-flight exchange.
    """

    client_id: str
    client_secret: str
    http_client: httpx.AsyncClient
    token_url: str = DEFAULT_TOKEN_URL
    scope: str = DEFAULT_SCOPE
    expiry_margin_seconds: float = 60
    request_timeout_seconds: float = 15
    debug: bool = False
    _credential: Credential | None = field(default=None, init=False, repr=False)
    _inflight: "asyncio.Task[Credential] | None" = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if not self.client_id or not self.client_secret:
            raise FoodApiError(
                FoodApiErrorKind.INVALID_URL,
                "FatSecret client id and secret must be configured",
            )
        require_http_url(self.token_url)

    @property
    def credential(self) -> Credential | None:
        """Currently cached credential, if any."""
        return self._credential

    async def ensure_token(self, timeout: float | None = None) -> Credential:
        """Return the cached credential or exchange client credentials for one."""
        cached = self._usable_credential()
        if cached is not None:
            return cached
        try:
            async with asyncio.timeout(timeout):
                # The exchange is shared; a deadline only stops this caller.
                return await asyncio.shield(self._shared_exchange())
        except TimeoutError as exc:
            raise FoodApiError(
                FoodApiErrorKind.CANCELLED, "Token request exceeded its deadline"
            ) from exc

    def invalidate(self) -> None:
        """Forget the cached credential so the next call re-authenticates."""
        if self._credential is not None:
            _logger.info("Invalidating cached FatSecret access token")
        self._credential = None

    def _usable_credential(self) -> Credential | None:
        credential = self._credential
        if credential is None:
            return None
        if credential.is_expired(datetime.now(tz=UTC), self.expiry_margin_seconds):
            return None
        return credential

    def _shared_exchange(self) -> "asyncio.Task[Credential]":
        if self._inflight is None:
            self._inflight = asyncio.create_task(self._refresh())
        return self._inflight

    async def _refresh(self) -> Credential:
        try:
            self._credential = await self._authenticate()
            return self._credential
        finally:
            self._inflight = None

    async def _authenticate(self) -> Credential:
        basic = _basic_auth(self.client_id, self.client_secret)
        headers = {
            "Authorization": f"Basic {basic}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        if self.debug:
            _logger.info(
                "FatSecret token request: url=%s headers=%s",
                self.token_url,
                redact_headers(headers),
            )
        try:
            response = await self.http_client.post(
                self.token_url,
                headers=headers,
                data={"grant_type": "client_credentials", "scope": self.scope},
                timeout=self.request_timeout_seconds,
            )
        except httpx.HTTPError as exc:
            _logger.warning("FatSecret token request failed: %s", type(exc).__name__)
            raise FoodApiError(FoodApiErrorKind.AUTHENTICATION_FAILED) from exc

        if self.debug:
            _logger.info("FatSecret token response: status=%s", response.status_code)
        if not response.is_success:
            _logger.warning(
                "FatSecret token request rejected: status=%s", response.status_code
            )
            raise FoodApiError(
                FoodApiErrorKind.AUTHENTICATION_FAILED,
                f"Token endpoint returned HTTP {response.status_code}",
            )

        try:
            payload = TokenResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise FoodApiError(
                FoodApiErrorKind.INVALID_RESPONSE, "Malformed token response"
            ) from exc

        expires_at = None
        if payload.expires_in is not None:
            expires_at = datetime.now(tz=UTC) + timedelta(seconds=payload.expires_in)
        _logger.info("Obtained FatSecret token: expires_in=%s", payload.expires_in)
        return Credential(
            access_token=payload.access_token,
            token_type=payload.token_type,
            expires_at=expires_at,
        )


def require_http_url(url: str) -> httpx.URL:
    """Parse an absolute http(s) URL or fail with an INVALID_URL error."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise FoodApiError(
            FoodApiErrorKind.INVALID_URL, f"Invalid URL: {url!r}"
        ) from exc
    if parsed.scheme not in {"http", "https"} or not parsed.host:
        raise FoodApiError(
            FoodApiErrorKind.INVALID_URL, f"URL must be absolute http(s): {url!r}"
        )
    return parsed


def _basic_auth(client_id: str, client_secret: str) -> str:
    """Encode client credentials for a Basic authorization header."""
    raw = f"{client_id}:{client_secret}".encode()
    return base64.b64encode(raw).decode("ascii")
