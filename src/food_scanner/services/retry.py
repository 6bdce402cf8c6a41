"""Opt-in retry wrapper for food lookup clients."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from food_scanner.adapters.fatsecret_client import FoodLookupClient
from food_scanner.domain.errors import FoodApiError, FoodApiErrorKind
from food_scanner.domain.foods import NutritionDetails, SearchResult

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")

RETRYABLE_KINDS = frozenset({FoodApiErrorKind.NETWORK_ERROR})


@dataclass
class RetryingFoodLookupClient(FoodLookupClient):
    """Lookup client that retries transport failures of a wrapped client."""

    client: FoodLookupClient
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search_by_query(
        self, query: str, timeout: float | None = None
    ) -> list[SearchResult]:
        """Search foods, retrying network errors."""
        return await self._call_with_retry(
            lambda: self.client.search_by_query(query, timeout=timeout),
            action="search",
        )

    async def get_details(
        self, food_id: str, timeout: float | None = None
    ) -> NutritionDetails:
        """Fetch food details, retrying network errors."""
        return await self._call_with_retry(
            lambda: self.client.get_details(food_id, timeout=timeout),
            action=f"food.get:{food_id}",
        )

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[_T]], *, action: str
    ) -> _T:
        """Call an async function, retrying only retryable failure kinds."""
        attempt = 0
        while True:
            try:
                return await func()
            except FoodApiError as exc:
                attempt += 1
                if exc.kind not in RETRYABLE_KINDS or attempt > self.retry_attempts:
                    raise
                _logger.warning(
                    "FatSecret %s failed (attempt %s/%s, kind=%s), retrying",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc.kind.value,
                )
                await asyncio.sleep(self.retry_delay_seconds)
