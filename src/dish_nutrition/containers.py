"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from dish_nutrition.adapters.conversion_loader import load_conversion_table
from dish_nutrition.adapters.openai_name_matcher import OpenAINameMatcher
from dish_nutrition.adapters.reference_loader import load_reference_table
from dish_nutrition.config import Settings
from dish_nutrition.domain.quantities import ConversionTable
from dish_nutrition.services.aggregator import NutritionAggregator
from dish_nutrition.services.estimation import EstimationService
from dish_nutrition.services.reference import ReferenceTable
from dish_nutrition.services.resolver import IngredientResolver, NameMatcher
from dish_nutrition.services.standardizer import QuantityStandardizer


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    reference_table: ReferenceTable
    conversion_table: ConversionTable
    resolver: IngredientResolver
    standardizer: QuantityStandardizer
    aggregator: NutritionAggregator
    estimation_service: EstimationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, name_matcher: NameMatcher | None = None
) -> AppContainer:
    """Load the tables and create the default dependency container.

    Raises ``TableLoadError`` when a required table cannot be loaded.
    """
    resolved_settings = settings or Settings()
    reference_table = load_reference_table(
        resolved_settings.nutrition_table_path, resolved_settings.synonyms_path
    )
    conversion_table = load_conversion_table(resolved_settings.conversions_path)

    openai_matcher: OpenAINameMatcher | None = None
    if name_matcher is None and resolved_settings.assisted_matching_enabled:
        openai_matcher = OpenAINameMatcher.create(
            api_key=str(resolved_settings.openai_api_key),
            model=resolved_settings.openai_model,
            timeout_seconds=resolved_settings.assisted_match_timeout_seconds,
        )
        name_matcher = openai_matcher

    resolver = IngredientResolver(
        table=reference_table,
        matcher=name_matcher,
        candidate_limit=resolved_settings.assisted_match_candidate_limit,
        match_timeout_seconds=resolved_settings.assisted_match_timeout_seconds,
    )
    standardizer = QuantityStandardizer(conversion_table)
    aggregator = NutritionAggregator(
        resolver=resolver,
        standardizer=standardizer,
        table=reference_table,
    )
    estimation_service = EstimationService(
        aggregator=aggregator,
        conversions=conversion_table,
        default_serving_grams=resolved_settings.default_serving_grams,
    )

    async def close_resources() -> None:
        if openai_matcher is not None:
            await openai_matcher.close()

    return AppContainer(
        settings=resolved_settings,
        reference_table=reference_table,
        conversion_table=conversion_table,
        resolver=resolver,
        standardizer=standardizer,
        aggregator=aggregator,
        estimation_service=estimation_service,
        close_resources=close_resources,
    )
