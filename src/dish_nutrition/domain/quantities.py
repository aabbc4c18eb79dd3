"""Quantity and unit conversion domain models."""

from collections.abc import Mapping
from dataclasses import dataclass

UnitConversion = float | Mapping[str, float]


@dataclass(frozen=True)
class ParsedQuantity:
    """Numeric value with its unit token.

    ``unit`` is None when the phrase could not be parsed.
    """

    value: float
    unit: str | None


@dataclass(frozen=True)
class ServingSize:
    """Standard serving for a dish type."""

    grams: float
    household_measure: str


@dataclass(frozen=True)
class ConversionTable:
    """Layered unit to grams conversion rules."""

    measurements: Mapping[str, UnitConversion]
    ingredient_categories: Mapping[str, str]
    category_units: Mapping[str, Mapping[str, float]]
    serving_sizes: Mapping[str, ServingSize]

    def category_for(self, ingredient: str) -> str | None:
        """Return the registered category of an ingredient, if any."""
        return self.ingredient_categories.get(ingredient)
