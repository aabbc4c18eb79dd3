"""Loader for the household measurement conversion table."""

import json
import logging
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dish_nutrition.adapters.reference_loader import TableLoadError
from dish_nutrition.domain.quantities import ConversionTable, ServingSize

_logger = logging.getLogger(__name__)


class FoodTypeConfig(BaseModel):
    """Standard serving for a dish type."""

    model_config = ConfigDict(populate_by_name=True)

    serving: float = Field(gt=0)
    household_measure: str = Field(default="1 serving", alias="householdMeasure")


class MeasurementsConfig(BaseModel):
    """Raw shape of the household measurement file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    measurements: dict[str, float | dict[str, float]] = Field(default_factory=dict)
    ingredients: dict[str, str] = Field(default_factory=dict)
    ingredient_categories: dict[str, dict[str, float]] = Field(
        default_factory=dict, alias="ingredientCategories"
    )
    food_types: dict[str, FoodTypeConfig] = Field(
        default_factory=dict, alias="foodTypes"
    )

    def to_table(self) -> ConversionTable:
        """Freeze the validated configuration into a conversion table."""
        measurements = {
            unit.lower(): (
                MappingProxyType({key.lower(): value for key, value in data.items()})
                if isinstance(data, dict)
                else data
            )
            for unit, data in self.measurements.items()
        }
        return ConversionTable(
            measurements=MappingProxyType(measurements),
            ingredient_categories=MappingProxyType(
                {name.lower(): category for name, category in self.ingredients.items()}
            ),
            category_units=MappingProxyType(
                {
                    category: MappingProxyType(units)
                    for category, units in self.ingredient_categories.items()
                }
            ),
            serving_sizes=MappingProxyType(
                {
                    dish_type: ServingSize(
                        grams=config.serving,
                        household_measure=config.household_measure,
                    )
                    for dish_type, config in self.food_types.items()
                }
            ),
        )


def load_conversion_table(path: Path) -> ConversionTable:
    """Load and validate the conversion table JSON."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise TableLoadError(f"Conversion table unavailable: {path}") from exc
    try:
        config = MeasurementsConfig.model_validate(payload)
    except ValidationError as exc:
        raise TableLoadError(f"Conversion table invalid: {path}: {exc}") from exc
    table = config.to_table()
    _logger.info(
        "Loaded %s unit conversions and %s dish types",
        len(table.measurements),
        len(table.serving_sizes),
    )
    return table
