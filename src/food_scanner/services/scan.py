"""Barcode scan lookups built on the food lookup client."""

import logging
from dataclasses import dataclass

from food_scanner.adapters.fatsecret_client import FoodLookupClient
from food_scanner.domain.foods import NutritionDetails
from food_scanner.domain.scans import ScanResult

_logger = logging.getLogger(__name__)

_MISSING = "N/A"


class ScanRejectedError(ValueError):
    """Raised when a scanned code is unusable for a lookup."""


class NoFoodFoundError(LookupError):
    """Raised when a search for a scanned code matches nothing."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__("No food found for this barcode")


@dataclass
class ScanService:
    """Resolve decoded barcodes to nutrition details.

    Detection happens upstream; this service only gates on the reported
    confidence, searches, and fetches details for the first match.
    """

    lookup_client: FoodLookupClient
    min_confidence: float = 0.8
    timeout_seconds: float | None = None

    async def lookup_barcode(
        self, code: str, confidence: float | None = None
    ) -> ScanResult:
        """Search for ``code`` and return details of the first match."""
        cleaned = code.strip()
        if not cleaned:
            raise ScanRejectedError("Scanned code is empty")
        if confidence is not None and confidence < self.min_confidence:
            raise ScanRejectedError(
                f"Detection confidence {confidence:.2f} is below "
                f"{self.min_confidence:.2f}"
            )

        matches = await self.lookup_client.search_by_query(
            cleaned, timeout=self.timeout_seconds
        )
        if not matches:
            _logger.info("No FatSecret match for scanned code")
            raise NoFoodFoundError(cleaned)

        match = matches[0]
        details = await self.lookup_client.get_details(
            match.id, timeout=self.timeout_seconds
        )
        return ScanResult(match=match, details=details)


def format_nutrition_summary(details: NutritionDetails) -> str:
    """Render the first serving of a food as a short text block."""
    serving = details.first_serving
    if serving is None:
        return details.name
    lines = [
        details.name,
        f"Calories: {serving.calories}",
        f"Protein: {serving.protein or _MISSING}",
        f"Carbs: {serving.carbohydrate or _MISSING}",
        f"Fat: {serving.fat or _MISSING}",
        f"Serving: {serving.serving_description}",
    ]
    return "\n".join(lines)
