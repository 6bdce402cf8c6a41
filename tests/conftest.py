"""Shared test fixtures."""

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import parse_qs

import httpx
import pytest

from food_scanner.adapters.fatsecret_auth import HttpxTokenManager, TokenManager
from food_scanner.adapters.fatsecret_client import (
    FoodLookupClient,
    HttpxFoodLookupClient,
)
from food_scanner.config import Settings
from food_scanner.containers import AppContainer
from food_scanner.domain.auth import Credential
from food_scanner.domain.errors import FoodApiError
from food_scanner.domain.foods import NutritionDetails, SearchResult, Serving
from food_scanner.services.scan import ScanService

TOKEN_URL = "https://oauth.test/connect/token"
API_URL = "https://platform.test/rest/server.api"

TOKEN_BODY = {"access_token": "tok123", "expires_in": 3600, "token_type": "bearer"}

SEARCH_BODY = {
    "foods": {
        "food": [
            {
                "food_id": "12345",
                "food_name": "Apple",
                "food_description": "Per 100g - Calories: 52kcal",
                "brand_name": None,
            }
        ]
    }
}

DETAILS_BODY = {
    "food": {
        "food_id": "12345",
        "food_name": "Apple",
        "servings": {
            "serving": [
                {
                    "calories": "52",
                    "serving_description": "100 g",
                    "metric_serving_amount": "100.000",
                    "metric_serving_unit": "g",
                    "protein": "0.26",
                    "carbohydrate": "13.81",
                    "fat": "0.17",
                },
                {
                    "calories": "95",
                    "serving_description": "1 medium",
                },
            ]
        },
    }
}


@dataclass
class FakeFatSecret:
    """In-process stand-in for the token and platform endpoints."""

    token_status: int = 200
    token_body: object = field(default_factory=lambda: dict(TOKEN_BODY))
    api_status: int = 200
    search_body: object = field(default_factory=lambda: SEARCH_BODY)
    details_body: object = field(default_factory=lambda: DETAILS_BODY)
    delay_seconds: float = 0.0
    token_requests: list[httpx.Request] = field(default_factory=list)
    api_requests: list[httpx.Request] = field(default_factory=list)
    api_error: Callable[[httpx.Request], Exception] | None = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if str(request.url) == TOKEN_URL:
            self.token_requests.append(request)
            return _response(self.token_status, self.token_body)
        self.api_requests.append(request)
        if self.api_error is not None:
            raise self.api_error(request)
        method = request.url.params.get("method")
        body = self.search_body if method == "foods.search" else self.details_body
        return _response(self.api_status, body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def token_form(self, index: int = 0) -> dict[str, list[str]]:
        return parse_qs(self.token_requests[index].content.decode())


def _response(status_code: int, body: object) -> httpx.Response:
    if isinstance(body, bytes):
        return httpx.Response(status_code, content=body)
    return httpx.Response(status_code, content=json.dumps(body).encode())


def make_token_manager(
    server: FakeFatSecret, **kwargs: object
) -> HttpxTokenManager:
    return HttpxTokenManager(
        client_id="client-id",
        client_secret="client-secret",
        http_client=httpx.AsyncClient(transport=server.transport()),
        token_url=TOKEN_URL,
        **kwargs,  # type: ignore[arg-type]
    )


def make_lookup_client(
    server: FakeFatSecret, token_manager: TokenManager | None = None
) -> HttpxFoodLookupClient:
    return HttpxFoodLookupClient(
        token_manager=token_manager or make_token_manager(server),
        http_client=httpx.AsyncClient(transport=server.transport()),
        base_url=API_URL,
    )


@dataclass
class FakeLookupClient(FoodLookupClient):
    """Lookup client returning canned results and recording calls."""

    results: list[SearchResult] = field(
        default_factory=lambda: [
            SearchResult(id="12345", name="Apple"),
            SearchResult(id="67890", name="Green Apple"),
        ]
    )
    details: dict[str, NutritionDetails] = field(
        default_factory=lambda: {
            "12345": NutritionDetails(
                id="12345",
                name="Apple",
                servings=(
                    Serving(
                        calories="52",
                        serving_description="100 g",
                        protein="0.26",
                        carbohydrate="13.81",
                    ),
                ),
            )
        }
    )
    error: FoodApiError | None = None
    queries: list[str] = field(default_factory=list)
    detail_ids: list[str] = field(default_factory=list)

    async def search_by_query(
        self, query: str, timeout: float | None = None
    ) -> list[SearchResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)

    async def get_details(
        self, food_id: str, timeout: float | None = None
    ) -> NutritionDetails:
        self.detail_ids.append(food_id)
        if self.error is not None:
            raise self.error
        return self.details[food_id]


@dataclass
class StaticTokenManager:
    """Token manager that always returns the same credential."""

    credential: Credential = field(
        default_factory=lambda: Credential(access_token="static-token")
    )
    invalidations: int = 0

    async def ensure_token(self, timeout: float | None = None) -> Credential:
        return self.credential

    def invalidate(self) -> None:
        self.invalidations += 1


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fatsecret_client_id="client-id",
        fatsecret_client_secret="client-secret",
    )


@pytest.fixture
def fatsecret() -> FakeFatSecret:
    return FakeFatSecret()


@pytest.fixture
def lookup_client() -> FakeLookupClient:
    return FakeLookupClient()


@pytest.fixture
def container(settings: Settings, lookup_client: FakeLookupClient) -> AppContainer:
    scan_service = ScanService(
        lookup_client=lookup_client,
        min_confidence=settings.min_barcode_confidence,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_manager=StaticTokenManager(),
        lookup_client=lookup_client,
        scan_service=scan_service,
        close_resources=close_resources,
    )
