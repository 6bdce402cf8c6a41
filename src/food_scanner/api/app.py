"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from food_scanner.api.models import (
    NutritionDetailsOut,
    ScanRequest,
    ScanResponse,
    SearchResponse,
    SearchResultOut,
)
from food_scanner.app_logging import configure_logging
from food_scanner.containers import AppContainer
from food_scanner.domain.errors import FoodApiError, FoodApiErrorKind
from food_scanner.services.scan import (
    NoFoodFoundError,
    ScanRejectedError,
    format_nutrition_summary,
)

_ERROR_STATUS = {
    FoodApiErrorKind.INVALID_URL: status.HTTP_400_BAD_REQUEST,
    FoodApiErrorKind.AUTHENTICATION_FAILED: status.HTTP_502_BAD_GATEWAY,
    FoodApiErrorKind.INVALID_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    FoodApiErrorKind.NETWORK_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    FoodApiErrorKind.CANCELLED: status.HTTP_504_GATEWAY_TIMEOUT,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(FoodApiError)
    async def food_api_error_handler(
        request: Request, exc: FoodApiError
    ) -> JSONResponse:
        logger.warning(
            "Food lookup failed: path=%s kind=%s", request.url.path, exc.kind.value
        )
        return JSONResponse(
            status_code=_ERROR_STATUS[exc.kind],
            content={"detail": exc.description, "kind": exc.kind.value},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/search")
    async def search_foods(
        request: Request, q: str = Query(min_length=1)
    ) -> SearchResponse:
        """Search foods by free text or barcode."""
        state_container: AppContainer = request.app.state.container
        results = await state_container.lookup_client.search_by_query(q)
        return SearchResponse(
            foods=[SearchResultOut.from_domain(result) for result in results]
        )

    @app.get("/foods/{food_id}")
    async def food_details(food_id: str, request: Request) -> NutritionDetailsOut:
        """Return nutrition details for a food id."""
        state_container: AppContainer = request.app.state.container
        details = await state_container.lookup_client.get_details(food_id)
        return NutritionDetailsOut.from_domain(details)

    @app.post("/scans")
    async def scan_barcode(payload: ScanRequest, request: Request) -> ScanResponse:
        """Resolve a decoded barcode to the first matching food."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.scan_service.lookup_barcode(
                payload.barcode, confidence=payload.confidence
            )
        except ScanRejectedError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except NoFoodFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return ScanResponse(
            match=SearchResultOut.from_domain(result.match),
            details=NutritionDetailsOut.from_domain(result.details),
            summary=format_nutrition_summary(result.details),
        )

    return app
