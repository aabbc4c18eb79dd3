"""Dish nutrition estimation service."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from dish_nutrition.domain.nutrition import (
    DishNutritionTotals,
    PerServingResult,
    ProcessedIngredient,
)
from dish_nutrition.domain.quantities import ConversionTable, ServingSize
from dish_nutrition.domain.recipes import Recipe, RecipeIngredient
from dish_nutrition.services.aggregator import (
    DEFAULT_SERVING_GRAMS,
    NutritionAggregator,
    compute_per_serving,
)

_logger = logging.getLogger(__name__)

DEFAULT_HOUSEHOLD_MEASURE = "1 serving"


@dataclass(frozen=True)
class DishEstimate:
    """Totals and per-ingredient results for one estimation request."""

    dish_type: str | None
    totals: DishNutritionTotals
    processed: list[ProcessedIngredient]
    serving: ServingSize

    def per_serving(self, target_grams: float | None = None) -> PerServingResult:
        """Scale totals to ``target_grams``, or to the dish type's serving."""
        if target_grams is None:
            target_grams = self.serving.grams
        return compute_per_serving(self.totals, target_grams)

    @property
    def unresolved(self) -> list[ProcessedIngredient]:
        """Ingredients excluded from totals."""
        return [item for item in self.processed if not item.resolved]


@dataclass
class EstimationService:
    """Entry point combining resolution, standardization and aggregation."""

    aggregator: NutritionAggregator
    conversions: ConversionTable
    default_serving_grams: float = DEFAULT_SERVING_GRAMS

    async def estimate(
        self,
        ingredients: Sequence[RecipeIngredient],
        dish_type: str | None = None,
    ) -> DishEstimate:
        """Estimate nutrition for an ingredient list."""
        totals, processed = await self.aggregator.aggregate(ingredients)
        resolved = sum(1 for item in processed if item.resolved)
        _logger.info(
            "Estimated dish: type=%s ingredients=%s resolved=%s weight=%.1fg",
            dish_type,
            len(processed),
            resolved,
            totals.total_weight_grams,
        )
        return DishEstimate(
            dish_type=dish_type,
            totals=totals,
            processed=processed,
            serving=self.serving_size(dish_type),
        )

    async def estimate_recipe(self, recipe: Recipe) -> DishEstimate:
        """Estimate nutrition for a recipe from the recipe source."""
        return await self.estimate(recipe.ingredients, dish_type=recipe.dish_type)

    def serving_size(self, dish_type: str | None) -> ServingSize:
        """Return the standard serving for a dish type, or the default one."""
        serving = self.conversions.serving_sizes.get(dish_type or "")
        if serving is None:
            _logger.warning(
                "Unknown dish type: %s, using default serving size %s g",
                dish_type,
                self.default_serving_grams,
            )
            return ServingSize(
                grams=self.default_serving_grams,
                household_measure=DEFAULT_HOUSEHOLD_MEASURE,
            )
        return serving
