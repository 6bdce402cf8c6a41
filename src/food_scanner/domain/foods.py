"""Food lookup domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchResult:
    """A single food matched by a search."""

    id: str
    name: str
    description: str | None = None
    brand: str | None = None


@dataclass(frozen=True)
class Serving:
    """One reported portion for a food.

    Values are carried as the text the upstream API returns; parsing them
    into numbers is left to callers.
    """

    calories: str
    serving_description: str
    metric_amount: str | None = None
    metric_unit: str | None = None
    protein: str | None = None
    carbohydrate: str | None = None
    fat: str | None = None


@dataclass(frozen=True)
class NutritionDetails:
    """Nutrition details for a food, servings in upstream order."""

    id: str
    name: str
    servings: tuple[Serving, ...] = ()

    @property
    def first_serving(self) -> Serving | None:
        """Return the first serving, if the food reports any."""
        if not self.servings:
            return None
        return self.servings[0]
