"""Shared test fixtures."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

import pytest

from dish_nutrition.config import Settings
from dish_nutrition.domain.nutrition import NutritionRecord
from dish_nutrition.domain.quantities import ConversionTable, ServingSize
from dish_nutrition.services.aggregator import NutritionAggregator
from dish_nutrition.services.estimation import EstimationService
from dish_nutrition.services.reference import ReferenceTable
from dish_nutrition.services.resolver import IngredientResolver, NameMatcher
from dish_nutrition.services.standardizer import QuantityStandardizer


def record(
    name: str,
    calories: float,
    protein: float = 0.0,
    carbs: float = 0.0,
    fat: float = 0.0,
    fiber: float = 0.0,
) -> NutritionRecord:
    """Build a reference record with per-100 g values."""
    return NutritionRecord(
        canonical_name=name,
        calories_per_100g=calories,
        protein_per_100g=protein,
        carbs_per_100g=carbs,
        fat_per_100g=fat,
        fiber_per_100g=fiber,
    )


@dataclass
class FakeNameMatcher(NameMatcher):
    """Fake assisted matcher returning canned answers."""

    answers: dict[str, str] = field(default_factory=dict)
    calls: list[tuple[str, list[str]]] = field(default_factory=list)
    error: Exception | None = None
    delay_seconds: float = 0.0
    in_flight: int = 0
    max_in_flight: int = 0

    async def match(self, raw_name: str, candidates: Sequence[str]) -> str:
        self.calls.append((raw_name, list(candidates)))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay_seconds:
                await asyncio.sleep(self.delay_seconds)
        finally:
            self.in_flight -= 1
        if self.error is not None:
            raise self.error
        return self.answers.get(raw_name, "None")


@pytest.fixture
def reference_table() -> ReferenceTable:
    return ReferenceTable.from_records(
        [
            record("onion", 40, protein=1.1, carbs=9.3, fat=0.1, fiber=1.7),
            record("onion_spring", 32, protein=1.8, carbs=7.3, fat=0.2, fiber=2.6),
            record("tomato", 18, protein=0.9, carbs=3.9, fat=0.2, fiber=1.2),
            record("potato", 77, protein=2.0, carbs=17.5, fat=0.1, fiber=2.2),
            record("spinach", 23, protein=2.9, carbs=3.6, fat=0.4, fiber=2.2),
            record("chili_powder_red", 282, protein=13.5, carbs=49.7, fat=14.3),
            record("chicken_breast", 165, protein=31.0, fat=3.6),
            record("wheat_flour", 341, protein=12.1, carbs=69.4, fat=1.7, fiber=11.2),
            record("ghee", 900, fat=99.5),
            record("oil", 884, fat=100),
            record("yogurt", 60, protein=3.1, carbs=3.0, fat=4.0),
        ],
        synonyms={
            "dahi": "yogurt",
            "atta": "wheat_flour",
            "palak": "spinach",
            "olive oil": "olive_oil",
        },
    )


@pytest.fixture
def conversion_table() -> ConversionTable:
    return ConversionTable(
        measurements=MappingProxyType(
            {
                "cup": {"default": 150, "wheat_flour": 120},
                "tablespoon": 15,
                "teaspoon": {"default": 5},
                "piece": {"default": 30, "potato": 150},
                "medium": {"onion": 120},
                "katori": 150,
                "bunch": {"spinach": 100},
            }
        ),
        ingredient_categories=MappingProxyType({"spinach": "leafy_green"}),
        category_units=MappingProxyType({"leafy_green": {"cup": 30}}),
        serving_sizes=MappingProxyType(
            {
                "main_course": ServingSize(grams=200, household_measure="1 katori"),
                "beverage": ServingSize(grams=250, household_measure="1 glass"),
            }
        ),
    )


@pytest.fixture
def name_matcher() -> FakeNameMatcher:
    return FakeNameMatcher()


@pytest.fixture
def resolver(
    reference_table: ReferenceTable, name_matcher: FakeNameMatcher
) -> IngredientResolver:
    return IngredientResolver(table=reference_table, matcher=name_matcher)


@pytest.fixture
def standardizer(conversion_table: ConversionTable) -> QuantityStandardizer:
    return QuantityStandardizer(conversion_table)


@pytest.fixture
def aggregator(
    resolver: IngredientResolver,
    standardizer: QuantityStandardizer,
    reference_table: ReferenceTable,
) -> NutritionAggregator:
    return NutritionAggregator(
        resolver=resolver, standardizer=standardizer, table=reference_table
    )


@pytest.fixture
def estimation_service(
    aggregator: NutritionAggregator, conversion_table: ConversionTable
) -> EstimationService:
    return EstimationService(aggregator=aggregator, conversions=conversion_table)


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key=None, _env_file=None)
