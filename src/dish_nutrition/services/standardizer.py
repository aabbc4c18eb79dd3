"""Conversion of parsed quantities into gram weights."""

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from dish_nutrition.domain.quantities import ConversionTable, ParsedQuantity
from dish_nutrition.services.quantities import QuantityParser

_logger = logging.getLogger(__name__)

MEDIUM_DEFAULT_GRAMS = 120.0
UNKNOWN_UNIT_GRAMS = 10.0
FALLBACK_GRAMS_PER_UNIT: dict[str, float] = {
    "cup": 150.0,
    "tablespoon": 15.0,
    "teaspoon": 5.0,
    "piece": 30.0,
    "clove": 5.0,
    "inch": 10.0,
    "handful": 30.0,
    "pinch": 0.5,
}

GramStrategy = Callable[[float, str, str, ConversionTable], float | None]


def direct_weight(
    value: float, unit: str, ingredient: str, table: ConversionTable
) -> float | None:
    """Grams pass through; milliliters assume a density of 1 g/ml."""
    if unit in {"g", "ml"}:
        return value
    return None


def piece_weight(
    value: float, unit: str, ingredient: str, table: ConversionTable
) -> float | None:
    """Per-piece weight for the ingredient, else the global piece default."""
    if unit != "piece":
        return None
    piece = table.measurements.get("piece")
    if isinstance(piece, Mapping):
        per_piece = piece.get(ingredient, piece.get("default"))
        return value * per_piece if per_piece is not None else None
    if piece is not None:
        return value * piece
    return None


def medium_weight(
    value: float, unit: str, ingredient: str, table: ConversionTable
) -> float | None:
    """Per-medium weight for the ingredient, else a generic medium item."""
    if unit != "medium":
        return None
    medium = table.measurements.get("medium")
    if isinstance(medium, Mapping) and medium.get(ingredient) is not None:
        return value * medium[ingredient]
    _logger.warning(
        "No medium weight for %r, using %s g", ingredient, MEDIUM_DEFAULT_GRAMS
    )
    return value * MEDIUM_DEFAULT_GRAMS


def category_weight(
    value: float, unit: str, ingredient: str, table: ConversionTable
) -> float | None:
    """Unit factor registered for the ingredient's category."""
    category = table.category_for(ingredient)
    if category is None:
        return None
    factor = table.category_units.get(category, {}).get(unit)
    return value * factor if factor is not None else None


def unit_table_weight(
    value: float, unit: str, ingredient: str, table: ConversionTable
) -> float | None:
    """Global per-unit conversion, most specific entry first."""
    unit_data = table.measurements.get(unit)
    if unit_data is None:
        return None
    if not isinstance(unit_data, Mapping):
        return value * unit_data
    factor = unit_data.get(ingredient, unit_data.get("default"))
    if factor is None:
        _logger.warning(
            "No specific or default conversion for unit %r, using %s g",
            unit,
            UNKNOWN_UNIT_GRAMS,
        )
        factor = UNKNOWN_UNIT_GRAMS
    return value * factor


def fallback_weight(
    value: float, unit: str, ingredient: str, table: ConversionTable
) -> float | None:
    """Fixed household defaults; unknown units weigh 10 g each."""
    factor = FALLBACK_GRAMS_PER_UNIT.get(unit)
    if factor is None:
        _logger.warning(
            "No conversion for %s %s of %r, using %s g per unit",
            value,
            unit,
            ingredient,
            UNKNOWN_UNIT_GRAMS,
        )
        factor = UNKNOWN_UNIT_GRAMS
    return value * factor


GRAM_STRATEGIES: tuple[GramStrategy, ...] = (
    direct_weight,
    piece_weight,
    medium_weight,
    category_weight,
    unit_table_weight,
    fallback_weight,
)


@dataclass
class QuantityStandardizer:
    """Converts quantity phrases into grams for a canonical ingredient."""

    conversions: ConversionTable
    parser: QuantityParser = field(default_factory=QuantityParser)
    strategies: tuple[GramStrategy, ...] = GRAM_STRATEGIES

    def standardize(self, phrase: str | None, ingredient_name: str | None) -> float:
        """Parse a phrase and convert it to grams."""
        return self.to_grams(self.parser.parse(phrase), ingredient_name)

    def to_grams(self, parsed: ParsedQuantity, ingredient_name: str | None) -> float:
        """Return a finite, non-negative gram weight for a parsed quantity."""
        if parsed.unit is None:
            return 0.0
        value = _safe_float(parsed.value)
        if value == 0.0:
            return 0.0
        ingredient = (ingredient_name or "").lower().strip()
        for strategy in self.strategies:
            grams = strategy(value, parsed.unit, ingredient, self.conversions)
            if grams is not None:
                return _non_negative(grams, parsed, ingredient)
        return 0.0


def _safe_float(value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) and number > 0 else 0.0


def _non_negative(grams: float, parsed: ParsedQuantity, ingredient: str) -> float:
    if not math.isfinite(grams) or grams < 0:
        _logger.warning(
            "Invalid weight %s for %s %s of %r, using 0",
            grams,
            parsed.value,
            parsed.unit,
            ingredient,
        )
        return 0.0
    return float(grams)
