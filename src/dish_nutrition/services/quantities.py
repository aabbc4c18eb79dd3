"""Parsing of free-text quantity phrases."""

import logging
import re
from dataclasses import dataclass

from dish_nutrition.domain.quantities import ParsedQuantity

_logger = logging.getLogger(__name__)

GRAMS_PER_POUND = 453.592

_NUMBER = r"\d+(?:\.\d+)?"
_MIXED = r"(?:\d+(?:\s+|\s*-\s*))?\d+\s*/\s*\d+"
_AMOUNT = rf"(?<![\d/.])({_MIXED}|{_NUMBER})"
_GRAMS = re.compile(rf"{_AMOUNT}\s*(?:g|gm|gms|gram|grams)\b")
_POUNDS = re.compile(rf"{_AMOUNT}\s*(?:pound|lb)s?\b")
_MILLILITERS = re.compile(rf"{_AMOUNT}\s*ml\b")
_RANGE = re.compile(
    rf"(?<![\d/.])({_NUMBER})\s*-\s*({_NUMBER})(?![\d.]|\s*/)\s*([a-z]+)?"
)
_FRACTION = re.compile(rf"(?<![\d.])({_MIXED})\s*([a-z]+)?")
_MIXED_PARTS = re.compile(r"(?:(\d+)[\s-]+)?(\d+)\s*/\s*(\d+)")
_GENERAL = re.compile(rf"({_NUMBER})[\s-]*([a-z]+)")
_BARE_NUMBER = re.compile(rf"^\s*({_NUMBER})\s*$")
_QUALITATIVE = ("to taste", "as needed", "as required")

UNIT_ALIASES: dict[str, str] = {
    "cups": "cup",
    "tbsp": "tablespoon",
    "tbsps": "tablespoon",
    "tbs": "tablespoon",
    "tablespoons": "tablespoon",
    "tsp": "teaspoon",
    "tsps": "teaspoon",
    "teaspoons": "teaspoon",
    "pieces": "piece",
    "pcs": "piece",
    "cloves": "clove",
    "inches": "inch",
    "handfuls": "handful",
    "pinches": "pinch",
    "katoris": "katori",
    "glasses": "glass",
    "kgs": "kg",
    "litre": "l",
    "liter": "l",
    "litres": "l",
    "liters": "l",
    "ounce": "oz",
    "ounces": "oz",
}

UNPARSED = ParsedQuantity(value=0.0, unit=None)


def canonical_unit(word: str | None) -> str | None:
    """Lowercase a unit word and fold plural and abbreviated spellings."""
    if not word:
        return None
    lowered = word.strip().lower()
    return UNIT_ALIASES.get(lowered, lowered)


@dataclass(frozen=True)
class QuantityParser:
    """Turns quantity phrases such as ``"1/2 cup"`` into a value and unit."""

    qualitative_default: ParsedQuantity = ParsedQuantity(value=0.5, unit="teaspoon")
    bare_number_unit: str = "piece"

    def parse(self, phrase: str | None) -> ParsedQuantity:
        """Parse a phrase; unparseable input yields ``ParsedQuantity(0, None)``."""
        if not isinstance(phrase, str) or not phrase.strip():
            return UNPARSED
        text = phrase.strip().lower()

        if "glass" not in text and (match := _GRAMS.search(text)):
            return _measured(match.group(1), "g", phrase)

        if match := _POUNDS.search(text):
            return _measured(match.group(1), "g", phrase, GRAMS_PER_POUND)

        if match := _MILLILITERS.search(text):
            return _measured(match.group(1), "ml", phrase)

        if match := _RANGE.search(text):
            low, high = float(match.group(1)), float(match.group(2))
            unit = canonical_unit(match.group(3)) or self.bare_number_unit
            return ParsedQuantity(value=(low + high) / 2, unit=unit)

        if match := _FRACTION.search(text):
            return self._parse_fraction(match, phrase)

        if match := _GENERAL.search(text):
            return ParsedQuantity(
                value=float(match.group(1)), unit=canonical_unit(match.group(2))
            )

        if any(marker in text for marker in _QUALITATIVE):
            return self.qualitative_default

        if match := _BARE_NUMBER.match(text):
            return ParsedQuantity(
                value=float(match.group(1)), unit=self.bare_number_unit
            )

        _logger.warning("Could not parse quantity: %r", phrase)
        return UNPARSED

    def _parse_fraction(self, match: re.Match[str], phrase: str) -> ParsedQuantity:
        amount, unit = match.groups()
        return _measured(
            amount, canonical_unit(unit) or self.bare_number_unit, phrase
        )


def amount_value(amount: str) -> float | None:
    """Return the value of ``"2"``, ``"1.5"``, ``"1/2"`` or ``"1 1/2"``.

    A hyphen may join the whole number and the fraction (``"1-1/2"``).
    Returns None for a zero denominator.
    """
    mixed = _MIXED_PARTS.fullmatch(amount.strip())
    if mixed is None:
        return float(amount)
    whole, numerator, denominator = mixed.groups()
    if int(denominator) == 0:
        return None
    return int(whole or 0) + int(numerator) / int(denominator)


def _measured(
    amount: str, unit: str, phrase: str, factor: float = 1.0
) -> ParsedQuantity:
    value = amount_value(amount)
    if value is None:
        _logger.warning("Zero denominator in quantity: %r", phrase)
        return UNPARSED
    return ParsedQuantity(value=value * factor, unit=unit)
