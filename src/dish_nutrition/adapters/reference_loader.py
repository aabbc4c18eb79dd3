"""Loaders for the prepared nutrition reference and synonym tables."""

import csv
import json
import logging
from pathlib import Path

from dish_nutrition.domain.nutrition import NutritionRecord
from dish_nutrition.services.reference import ReferenceTable

_logger = logging.getLogger(__name__)

NUTRITION_COLUMNS = (
    "ingredient",
    "calories_per_100g",
    "protein_per_100g",
    "carbs_per_100g",
    "fat_per_100g",
    "fiber_per_100g",
)


# Used when no synonym file is available.
DEFAULT_SYNONYMS: dict[str, str] = {
    "onions": "onion",
    "tomatoes": "tomato",
    "potatoes": "potato",
    "cashews": "cashew",
    "yoghurt": "yogurt",
    "dahi": "yogurt",
    "whole wheat flour": "wheat_flour",
    "atta": "wheat_flour",
    "maida": "refined_flour",
    "besan": "gram_flour",
    "red chili": "chili_powder_red",
    "lal mirch": "chili_powder_red",
    "haldi": "turmeric_powder",
    "jeera": "cumin_seeds",
    "dhaniya": "coriander_powder",
    "dhania": "coriander_leaves",
    "coriander": "coriander_leaves",
    "pudina": "mint_leaves",
    "matar": "green_peas",
    "aloo": "potato",
    "gobi": "cauliflower",
    "palak": "spinach",
    "arhar dal": "toor_dal",
}


class TableLoadError(RuntimeError):
    """Raised when a required reference table cannot be loaded."""


def load_reference_table(
    nutrition_path: Path, synonyms_path: Path | None = None
) -> ReferenceTable:
    """Load the nutrition CSV and optional synonym JSON into a table."""
    records = load_nutrition_records(nutrition_path)
    synonyms = load_synonyms(synonyms_path) if synonyms_path is not None else {}
    table = ReferenceTable.from_records(records, synonyms)
    if len(table) == 0:
        raise TableLoadError(f"Nutrition table is empty: {nutrition_path}")
    _logger.info(
        "Loaded %s ingredients and %s synonyms", len(table), len(table.synonyms)
    )
    return table


def load_nutrition_records(path: Path) -> list[NutritionRecord]:
    """Read nutrition rows; missing or non-numeric cells become 0."""
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            reader = csv.DictReader(handle)
            missing = [
                column
                for column in NUTRITION_COLUMNS
                if column not in (reader.fieldnames or [])
            ]
            if missing:
                raise TableLoadError(f"Nutrition table {path} lacks columns {missing}")
            return [
                _parse_row(row)
                for row in reader
                if (row.get("ingredient") or "").strip()
            ]
    except OSError as exc:
        raise TableLoadError(f"Nutrition table unavailable: {path}") from exc


def load_synonyms(path: Path) -> dict[str, str]:
    """Read the synonym mapping; a missing file yields the built-in defaults."""
    if not path.exists():
        _logger.warning(
            "Synonym table not found at %s, using %s built-in synonyms",
            path,
            len(DEFAULT_SYNONYMS),
        )
        return dict(DEFAULT_SYNONYMS)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise TableLoadError(f"Synonym table unreadable: {path}") from exc
    if not isinstance(payload, dict):
        raise TableLoadError(f"Synonym table must be a JSON object: {path}")
    return {
        str(phrase).lower().strip(): str(target).strip()
        for phrase, target in payload.items()
        if isinstance(target, str) and target.strip()
    }


def _parse_row(row: dict[str, str]) -> NutritionRecord:
    return NutritionRecord(
        canonical_name=row["ingredient"].strip(),
        calories_per_100g=_to_float(row.get("calories_per_100g")),
        protein_per_100g=_to_float(row.get("protein_per_100g")),
        carbs_per_100g=_to_float(row.get("carbs_per_100g")),
        fat_per_100g=_to_float(row.get("fat_per_100g")),
        fiber_per_100g=_to_float(row.get("fiber_per_100g")),
    )


def _to_float(raw: str | None) -> float:
    try:
        return float((raw or "").strip())
    except ValueError:
        return 0.0
