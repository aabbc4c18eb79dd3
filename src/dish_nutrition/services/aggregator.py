"""Per-ingredient nutrition scaling and dish-level aggregation."""

import asyncio
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, fields
from decimal import ROUND_HALF_UP, Decimal

from dish_nutrition.domain.nutrition import (
    DishNutritionTotals,
    NutrientValues,
    NutritionRecord,
    PerServingResult,
    ProcessedIngredient,
)
from dish_nutrition.domain.recipes import RecipeIngredient
from dish_nutrition.services.reference import ReferenceTable
from dish_nutrition.services.resolver import IngredientResolver
from dish_nutrition.services.standardizer import QuantityStandardizer

_logger = logging.getLogger(__name__)

DEFAULT_SERVING_GRAMS = 150.0
PER_SERVING_CAPS: dict[str, float] = {
    "calories": 1000,
    "protein": 100,
    "carbs": 200,
    "fat": 100,
}
_NUTRIENTS = tuple(item.name for item in fields(NutrientValues))


def finite_or_zero(value: float, label: str) -> float:
    """Return the value when finite and non-negative, else 0 with a warning."""
    if not isinstance(value, int | float) or not math.isfinite(value) or value < 0:
        _logger.warning("Invalid %s value %r, setting to 0", label, value)
        return 0.0
    return float(value)


def scale_record(record: NutritionRecord, weight_grams: float) -> NutrientValues:
    """Scale per-100 g reference values to a portion weight."""
    name = record.canonical_name

    def scaled(per_100g: float, nutrient: str) -> float:
        return finite_or_zero(per_100g * weight_grams / 100, f"{name} {nutrient}")

    return NutrientValues(
        calories=scaled(record.calories_per_100g, "calories"),
        protein=scaled(record.protein_per_100g, "protein"),
        carbs=scaled(record.carbs_per_100g, "carbs"),
        fat=scaled(record.fat_per_100g, "fat"),
        fiber=scaled(record.fiber_per_100g, "fiber"),
    )


def sum_totals(processed: Sequence[ProcessedIngredient]) -> DishNutritionTotals:
    """Sum nutrients and weight over ingredients that carry nutrition."""
    sums = dict.fromkeys(_NUTRIENTS, 0.0)
    total_weight = 0.0
    for item in processed:
        if item.nutrition is None:
            continue
        total_weight += item.weight_grams
        for nutrient in _NUTRIENTS:
            sums[nutrient] += getattr(item.nutrition, nutrient)
    return DishNutritionTotals(
        **{
            nutrient: finite_or_zero(value, f"total {nutrient}")
            for nutrient, value in sums.items()
        },
        total_weight_grams=finite_or_zero(total_weight, "total weight"),
    )


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero, as nutrition labels do."""
    exponent = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def clamp_per_serving(values: dict[str, float]) -> dict[str, float]:
    """Cap unrealistic per-serving values and floor negatives at zero."""
    clamped = dict(values)
    for nutrient, value in values.items():
        if not math.isfinite(value) or value < 0:
            _logger.warning("Invalid per-serving %s %r, setting to 0", nutrient, value)
            clamped[nutrient] = 0.0
            continue
        cap = PER_SERVING_CAPS.get(nutrient)
        if cap is not None and value > cap:
            _logger.warning(
                "Unusually high %s per serving: %s, capping at %s",
                nutrient,
                value,
                cap,
            )
            clamped[nutrient] = float(cap)
    return clamped


def compute_per_serving(
    totals: DishNutritionTotals, target_grams: float | None
) -> PerServingResult:
    """Scale dish totals to a serving of ``target_grams`` (150 g when unknown)."""
    if target_grams is None or not math.isfinite(target_grams) or target_grams <= 0:
        _logger.warning(
            "Unknown serving size %r, using %s g", target_grams, DEFAULT_SERVING_GRAMS
        )
        target_grams = DEFAULT_SERVING_GRAMS
    ratio = target_grams / max(totals.total_weight_grams, 1)
    scaled = {
        nutrient: getattr(totals, nutrient) * ratio for nutrient in _NUTRIENTS
    }
    rounded = {
        nutrient: round_half_up(value, 0 if nutrient == "calories" else 1)
        if math.isfinite(value)
        else value
        for nutrient, value in scaled.items()
    }
    clamped = clamp_per_serving(rounded)
    return PerServingResult(
        serving_size_grams=target_grams,
        calories=int(clamped["calories"]),
        protein=clamped["protein"],
        carbs=clamped["carbs"],
        fat=clamped["fat"],
        fiber=clamped["fiber"],
    )


@dataclass
class NutritionAggregator:
    """Resolves, weighs and sums the ingredients of a dish."""

    resolver: IngredientResolver
    standardizer: QuantityStandardizer
    table: ReferenceTable

    async def aggregate(
        self, ingredients: Sequence[RecipeIngredient]
    ) -> tuple[DishNutritionTotals, list[ProcessedIngredient]]:
        """Process every ingredient concurrently, then sum the resolved ones."""
        processed = await asyncio.gather(
            *(self.process(ingredient) for ingredient in ingredients)
        )
        return sum_totals(processed), list(processed)

    async def process(self, ingredient: RecipeIngredient) -> ProcessedIngredient:
        """Resolve and weigh one ingredient, capturing any failure."""
        phrase = ingredient.quantity_phrase
        try:
            mapped_name = await self.resolver.resolve(ingredient.name)
            if mapped_name is None:
                return _unresolved(
                    ingredient,
                    phrase,
                    f"No nutrition data found for {ingredient.name!r}",
                )
            record = self.table.get(mapped_name)
            if record is None:
                return _unresolved(
                    ingredient,
                    phrase,
                    f"Mapped name {mapped_name!r} missing from reference table",
                )
            weight_grams = self.standardizer.standardize(phrase, mapped_name)
            return ProcessedIngredient(
                original_name=ingredient.name,
                mapped_name=mapped_name,
                quantity_phrase=phrase,
                weight_grams=weight_grams,
                nutrition=scale_record(record, weight_grams),
            )
        except Exception as exc:
            _logger.exception("Error processing ingredient %r", ingredient.name)
            return _unresolved(ingredient, phrase, str(exc) or type(exc).__name__)


def _unresolved(
    ingredient: RecipeIngredient, phrase: str, error: str
) -> ProcessedIngredient:
    return ProcessedIngredient(
        original_name=ingredient.name,
        mapped_name=None,
        quantity_phrase=phrase,
        weight_grams=0.0,
        nutrition=None,
        error=error,
    )
