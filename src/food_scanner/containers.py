"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from food_scanner.adapters.fatsecret_auth import HttpxTokenManager, TokenManager
from food_scanner.adapters.fatsecret_client import (
    FoodLookupClient,
    HttpxFoodLookupClient,
)
from food_scanner.config import Settings
from food_scanner.services.retry import RetryingFoodLookupClient
from food_scanner.services.scan import ScanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_manager: TokenManager
    lookup_client: FoodLookupClient
    scan_service: ScanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    # Token exchange and lookups share one connection pool.
    http_client = httpx.AsyncClient()
    token_manager = HttpxTokenManager(
        client_id=resolved_settings.fatsecret_client_id,
        client_secret=resolved_settings.fatsecret_client_secret,
        http_client=http_client,
        token_url=resolved_settings.fatsecret_token_url,
        scope=resolved_settings.fatsecret_scope,
        expiry_margin_seconds=resolved_settings.token_expiry_margin_seconds,
        request_timeout_seconds=resolved_settings.fatsecret_timeout_seconds,
        debug=resolved_settings.log_http_debug,
    )
    lookup_client: FoodLookupClient = HttpxFoodLookupClient(
        token_manager=token_manager,
        http_client=http_client,
        base_url=resolved_settings.fatsecret_base_url,
        request_timeout_seconds=resolved_settings.fatsecret_timeout_seconds,
        debug=resolved_settings.log_http_debug,
    )
    if resolved_settings.retry_attempts > 0:
        lookup_client = RetryingFoodLookupClient(
            client=lookup_client,
            retry_attempts=resolved_settings.retry_attempts,
            retry_delay_seconds=resolved_settings.retry_delay_seconds,
        )
    scan_service = ScanService(
        lookup_client=lookup_client,
        min_confidence=resolved_settings.min_barcode_confidence,
    )

    async def close_resources() -> None:
        await http_client.aclose()

    return AppContainer(
        settings=resolved_settings,
        token_manager=token_manager,
        lookup_client=lookup_client,
        scan_service=scan_service,
        close_resources=close_resources,
    )
