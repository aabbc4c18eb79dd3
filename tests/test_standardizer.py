"""Tests for gram standardization."""

import math

import pytest

from dish_nutrition.domain.quantities import ParsedQuantity
from dish_nutrition.services.standardizer import QuantityStandardizer


@pytest.mark.parametrize("grams", [0.0, 1.0, 42.5, 250.0])
def test_literal_grams_round_trip(
    standardizer: QuantityStandardizer, grams: float
) -> None:
    assert standardizer.standardize(f"{grams} g", "onion") == grams


def test_milliliters_assume_unit_density(standardizer: QuantityStandardizer) -> None:
    assert standardizer.standardize("250 ml", "yogurt") == 250.0


def test_piece_uses_ingredient_weight(standardizer: QuantityStandardizer) -> None:
    assert standardizer.standardize("2 pieces", "potato") == 300.0


def test_piece_falls_back_to_default(standardizer: QuantityStandardizer) -> None:
    assert standardizer.standardize("2 pieces", "tomato") == 60.0


def test_medium_uses_ingredient_weight(standardizer: QuantityStandardizer) -> None:
    assert standardizer.standardize("2 medium", "onion") == 240.0


def test_medium_falls_back_to_generic_default(
    standardizer: QuantityStandardizer,
) -> None:
    assert standardizer.standardize("1 medium", "potato") == 120.0


def test_category_factor_beats_unit_default(
    standardizer: QuantityStandardizer,
) -> None:
    assert standardizer.standardize("1 cup", "spinach") == 30.0


def test_unit_table_prefers_ingredient_entry(
    standardizer: QuantityStandardizer,
) -> None:
    assert standardizer.standardize("1 cup", "wheat_flour") == 120.0


def test_half_cup_uses_unit_default(standardizer: QuantityStandardizer) -> None:
    assert standardizer.standardize("1/2 cup", "tomato") == 75.0


def test_plain_number_unit_conversion(standardizer: QuantityStandardizer) -> None:
    assert standardizer.standardize("2 katori", "yogurt") == 300.0


def test_unit_object_without_match_uses_ten_grams(
    standardizer: QuantityStandardizer,
) -> None:
    assert standardizer.standardize("2 bunch", "tomato") == 20.0


def test_to_taste_uses_teaspoon_default(standardizer: QuantityStandardizer) -> None:
    assert standardizer.standardize("to taste", "oil") == 2.5


def test_absolute_fallback_table(standardizer: QuantityStandardizer) -> None:
    assert standardizer.standardize("3 cloves", "garlic") == 15.0
    assert standardizer.standardize("2 pinch", "oil") == 1.0


def test_unknown_unit_defaults_to_ten_grams(
    standardizer: QuantityStandardizer,
) -> None:
    assert standardizer.standardize("3 sprigs", "spinach") == 30.0


def test_unparseable_phrase_weighs_nothing(
    standardizer: QuantityStandardizer,
) -> None:
    assert standardizer.standardize("a little", "oil") == 0.0
    assert standardizer.standardize("", None) == 0.0


@pytest.mark.parametrize(
    "parsed",
    [
        ParsedQuantity(float("nan"), "cup"),
        ParsedQuantity(float("inf"), "g"),
        ParsedQuantity(-2.0, "cup"),
        ParsedQuantity(3.0, None),
        ParsedQuantity(1.0, ""),
    ],
)
def test_to_grams_is_always_finite_and_non_negative(
    standardizer: QuantityStandardizer, parsed: ParsedQuantity
) -> None:
    grams = standardizer.to_grams(parsed, "onion")

    assert math.isfinite(grams)
    assert grams >= 0
