"""Models for FatSecret platform API payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from food_scanner.domain.foods import NutritionDetails, SearchResult, Serving

# Upstream error codes meaning the presented token is no longer accepted.
TOKEN_ERROR_CODES = frozenset({13, 14})


def _as_list(value: Any) -> Any:
    """Normalize the upstream single-object and missing-array forms to lists."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return value


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)


class TokenResponse(_WireModel):
    """Body of a successful client-credentials exchange."""

    access_token: str = Field(min_length=1)
    expires_in: int | None = None
    token_type: str | None = None


class ApiErrorBody(_WireModel):
    """Error object the platform API returns with a 200 status."""

    code: int
    message: str = ""


class ApiErrorEnvelope(_WireModel):
    error: ApiErrorBody


class FoodItem(_WireModel):
    food_id: str
    food_name: str
    food_description: str | None = None
    brand_name: str | None = None

    def to_domain(self) -> SearchResult:
        return SearchResult(
            id=self.food_id,
            name=self.food_name,
            description=self.food_description,
            brand=self.brand_name,
        )


class FoodList(_WireModel):
    food: list[FoodItem] = Field(default_factory=list)

    @field_validator("food", mode="before")
    @classmethod
    def _normalize_food(cls, value: Any) -> Any:
        return _as_list(value)


class FoodSearchResponse(_WireModel):
    """Response of ``method=foods.search``."""

    foods: FoodList

    def to_domain(self) -> list[SearchResult]:
        return [item.to_domain() for item in self.foods.food]


class ServingItem(_WireModel):
    calories: str
    serving_description: str
    metric_serving_amount: str | None = None
    metric_serving_unit: str | None = None
    protein: str | None = None
    carbohydrate: str | None = None
    fat: str | None = None

    def to_domain(self) -> Serving:
        return Serving(
            calories=self.calories,
            serving_description=self.serving_description,
            metric_amount=self.metric_serving_amount,
            metric_unit=self.metric_serving_unit,
            protein=self.protein,
            carbohydrate=self.carbohydrate,
            fat=self.fat,
        )


class ServingList(_WireModel):
    serving: list[ServingItem] = Field(default_factory=list)

    @field_validator("serving", mode="before")
    @classmethod
    def _normalize_serving(cls, value: Any) -> Any:
        return _as_list(value)


class FoodDetailsItem(_WireModel):
    food_id: str
    food_name: str
    servings: ServingList = Field(default_factory=ServingList)

    @field_validator("servings", mode="before")
    @classmethod
    def _normalize_servings(cls, value: Any) -> Any:
        if value is None or value == "":
            return {}
        return value


class FoodDetailsResponse(_WireModel):
    """Response of ``method=food.get``."""

    food: FoodDetailsItem

    def to_domain(self) -> NutritionDetails:
        return NutritionDetails(
            id=self.food.food_id,
            name=self.food.food_name,
            servings=tuple(item.to_domain() for item in self.food.servings.serving),
        )
