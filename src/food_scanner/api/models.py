"""Request and response models for the HTTP API."""

from dataclasses import asdict

from pydantic import BaseModel, Field

from food_scanner.domain.foods import NutritionDetails, SearchResult


class ScanRequest(BaseModel):
    """A barcode decoded by the scanner front-end."""

    barcode: str = Field(min_length=1)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class SearchResultOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    brand: str | None = None

    @classmethod
    def from_domain(cls, result: SearchResult) -> "SearchResultOut":
        return cls(**asdict(result))


class ServingOut(BaseModel):
    calories: str
    serving_description: str
    metric_amount: str | None = None
    metric_unit: str | None = None
    protein: str | None = None
    carbohydrate: str | None = None
    fat: str | None = None


class NutritionDetailsOut(BaseModel):
    id: str
    name: str
    servings: list[ServingOut]

    @classmethod
    def from_domain(cls, details: NutritionDetails) -> "NutritionDetailsOut":
        return cls(
            id=details.id,
            name=details.name,
            servings=[ServingOut(**asdict(serving)) for serving in details.servings],
        )


class SearchResponse(BaseModel):
    foods: list[SearchResultOut]


class ScanResponse(BaseModel):
    match: SearchResultOut
    details: NutritionDetailsOut
    summary: str
