"""FatSecret platform API client."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from food_scanner.adapters.fatsecret_auth import TokenManager, require_http_url
from food_scanner.app_logging import redact_url
from food_scanner.domain.errors import FoodApiError, FoodApiErrorKind
from food_scanner.domain.fatsecret import (
    TOKEN_ERROR_CODES,
    ApiErrorEnvelope,
    FoodDetailsResponse,
    FoodSearchResponse,
)
from food_scanner.domain.foods import NutritionDetails, SearchResult

DEFAULT_BASE_URL = "https://platform.fatsecret.com/rest/server.api"

_logger = logging.getLogger(__name__)

_ResponseT = TypeVar("_ResponseT", bound=BaseModel)


class FoodLookupClient(Protocol):
    """Interface for food database lookups."""

    async def search_by_query(
        self, query: str, timeout: float | None = None
    ) -> list[SearchResult]:
        """Search foods by free text or barcode, in upstream order."""

    async def get_details(
        self, food_id: str, timeout: float | None = None
    ) -> NutritionDetails:
        """Fetch nutrition details for a food id from a prior search."""


@dataclass
class HttpxFoodLookupClient(FoodLookupClient):
    """FatSecret lookup client implemented with httpx.

    Every operation makes a single attempt; failures surface as
    ``FoodApiError`` without retrying.
    """

    token_manager: TokenManager
    http_client: httpx.AsyncClient
    base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float = 15
    debug: bool = False

    def __post_init__(self) -> None:
        require_http_url(self.base_url)

    async def search_by_query(
        self, query: str, timeout: float | None = None
    ) -> list[SearchResult]:
        """Search foods matching ``query``."""
        if not query or not query.strip():
            raise FoodApiError(FoodApiErrorKind.INVALID_URL, "Search query is empty")
        payload = await self._call(
            {"method": "foods.search", "search_expression": query},
            FoodSearchResponse,
            action="search",
            timeout=timeout,
        )
        results = payload.to_domain()
        _logger.info("FatSecret search returned %s foods", len(results))
        return results

    async def get_details(
        self, food_id: str, timeout: float | None = None
    ) -> NutritionDetails:
        """Fetch nutrition details for ``food_id``."""
        if not food_id or not food_id.strip():
            raise FoodApiError(FoodApiErrorKind.INVALID_URL, "Food id is empty")
        payload = await self._call(
            {"method": "food.get", "food_id": food_id},
            FoodDetailsResponse,
            action=f"food.get:{food_id}",
            timeout=timeout,
        )
        return payload.to_domain()

    async def _call(
        self,
        params: dict[str, str],
        response_model: type[_ResponseT],
        *,
        action: str,
        timeout: float | None,
    ) -> _ResponseT:
        """Authenticate, send one GET and decode the body within a deadline."""
        try:
            async with asyncio.timeout(timeout):
                credential = await self.token_manager.ensure_token()
                response = await self._send(
                    {
                        **params,
                        "format": "json",
                        "oauth_token": credential.access_token,
                    },
                    action=action,
                )
        except TimeoutError as exc:
            raise FoodApiError(
                FoodApiErrorKind.CANCELLED, f"FatSecret {action} exceeded its deadline"
            ) from exc
        return self._decode(response, response_model, action=action)

    async def _send(self, params: dict[str, str], *, action: str) -> httpx.Response:
        try:
            response = await self.http_client.get(
                self.base_url,
                params=params,
                timeout=self.request_timeout_seconds,
            )
        except httpx.HTTPError as exc:
            _logger.warning("FatSecret %s failed: %s", action, type(exc).__name__)
            raise FoodApiError(FoodApiErrorKind.NETWORK_ERROR) from exc
        if self.debug:
            _logger.info(
                "FatSecret %s: url=%s status=%s",
                action,
                redact_url(response.request.url),
                response.status_code,
            )
        return response

    def _decode(
        self,
        response: httpx.Response,
        response_model: type[_ResponseT],
        *,
        action: str,
    ) -> _ResponseT:
        if response.status_code == httpx.codes.UNAUTHORIZED:
            self.token_manager.invalidate()
        if not response.is_success:
            _logger.warning(
                "FatSecret %s rejected: status=%s", action, response.status_code
            )
            raise FoodApiError(
                FoodApiErrorKind.INVALID_RESPONSE,
                f"FatSecret {action} returned HTTP {response.status_code}",
            )
        try:
            return response_model.model_validate_json(response.content)
        except ValidationError as exc:
            upstream_error = _parse_api_error(response.content)
            if upstream_error is None:
                raise FoodApiError(
                    FoodApiErrorKind.INVALID_RESPONSE,
                    f"Malformed FatSecret {action} response",
                ) from exc
            if upstream_error.error.code in TOKEN_ERROR_CODES:
                self.token_manager.invalidate()
            _logger.warning(
                "FatSecret %s error: code=%s message=%s",
                action,
                upstream_error.error.code,
                upstream_error.error.message,
            )
            raise FoodApiError(
                FoodApiErrorKind.INVALID_RESPONSE,
                f"FatSecret error {upstream_error.error.code}: "
                f"{upstream_error.error.message}",
            ) from exc


def _parse_api_error(content: bytes) -> ApiErrorEnvelope | None:
    """Return the upstream error envelope if the body is one."""
    try:
        return ApiErrorEnvelope.model_validate_json(content)
    except ValidationError:
        return None
