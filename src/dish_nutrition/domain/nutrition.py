"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutritionRecord:
    """Reference nutrition facts for a canonical ingredient, per 100 g."""

    canonical_name: str
    calories_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float
    fiber_per_100g: float


@dataclass(frozen=True)
class NutrientValues:
    """Absolute nutrient amounts for a weighed portion."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float


@dataclass(frozen=True)
class ProcessedIngredient:
    """Outcome of resolving and weighing a single recipe ingredient.

    Exactly one of ``nutrition`` and ``error`` is set.
    """

    original_name: str
    mapped_name: str | None
    quantity_phrase: str
    weight_grams: float
    nutrition: NutrientValues | None
    error: str | None = None

    @property
    def resolved(self) -> bool:
        """Return True when the ingredient contributes to dish totals."""
        return self.nutrition is not None


@dataclass(frozen=True)
class DishNutritionTotals:
    """Nutrient sums over every resolved ingredient of a dish."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    total_weight_grams: float


@dataclass(frozen=True)
class PerServingResult:
    """Dish nutrition scaled to a single serving."""

    serving_size_grams: float
    calories: int
    protein: float
    carbs: float
    fat: float
    fiber: float
