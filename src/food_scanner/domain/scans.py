"""Scan lookup domain models."""

from dataclasses import dataclass

from food_scanner.domain.foods import NutritionDetails, SearchResult


@dataclass(frozen=True)
class ScanResult:
    """Outcome of a barcode lookup: the chosen match and its details."""

    match: SearchResult
    details: NutritionDetails
