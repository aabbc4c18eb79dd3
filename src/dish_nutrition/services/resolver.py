"""Ingredient name resolution against the reference table.

A raw ingredient phrase is normalized once and then passed through an ordered
list of local matching strategies. The first strategy that yields a canonical
name wins. When none does, an optional assisted matcher is asked to pick from
a bounded list of candidate names.
"""

import asyncio
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from dish_nutrition.services.reference import ReferenceTable

_logger = logging.getLogger(__name__)

_UNITS = r"cup|tablespoon|teaspoon|tsp|tbsp|g|kg|ml|l|pound|lb|oz|katori|glass"
_AMOUNT = r"\d+(?:\.\d+)?\s*/?\d*\s*"
_QUANTITY_PATTERN = re.compile(
    rf"^{_AMOUNT}(?:{_UNITS})(?:s|es)?\b|\b{_AMOUNT}(?:{_UNITS})(?:s|es)?$"
)

MODIFIERS: tuple[str, ...] = (
    "chopped",
    "diced",
    "sliced",
    "minced",
    "grated",
    "cubed",
    "pureed",
    "finely",
    "roughly",
    "cut into",
    "cubes",
    "paste",
    "fresh",
    "dried",
    "powder",
    "whole",
    "leaves",
    "seeds",
    "boneless",
    "skinless",
    "plain",
    "for garnish",
    "to taste",
    "as needed",
    "as required",
    "medium",
    "large",
    "small",
    "1-inch",
    "pieces",
)
_MODIFIER_PATTERN = re.compile(
    r"\b(?:"
    + "|".join(re.escape(word) for word in sorted(MODIFIERS, key=len, reverse=True))
    + r")\b"
)
_PUNCTUATION_PATTERN = re.compile(r"[(),:]")
_WHITESPACE_PATTERN = re.compile(r"\s+")

ResolverStrategy = Callable[[str, ReferenceTable], str | None]


class NameMatcher(Protocol):
    """Interface for assisted ingredient name matching."""

    async def match(self, raw_name: str, candidates: Sequence[str]) -> str:
        """Return the best candidate name, or "none" when nothing fits."""


def normalize_name(raw_name: str) -> str:
    """Lowercase an ingredient phrase and strip quantities and modifiers."""
    original = raw_name.lower().strip()
    cleaned = _QUANTITY_PATTERN.sub("", original).strip()
    cleaned = _MODIFIER_PATTERN.sub("", cleaned)
    cleaned = _PUNCTUATION_PATTERN.sub("", cleaned)
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned).strip()
    return cleaned or original


def underscored(name: str) -> str:
    """Return the table spelling of a spaced name."""
    return _WHITESPACE_PATTERN.sub("_", name)


def match_underscored(normalized: str, table: ReferenceTable) -> str | None:
    """Exact match on the underscored form."""
    candidate = underscored(normalized)
    return candidate if candidate in table else None


def match_spaced(normalized: str, table: ReferenceTable) -> str | None:
    """Exact match on the spaced form."""
    return normalized if normalized in table else None


def match_synonym(normalized: str, table: ReferenceTable) -> str | None:
    """Synonym lookup, ignoring synonyms whose target is absent."""
    return table.synonym_target(normalized)


def substring_candidates(normalized: str, table: ReferenceTable) -> list[str]:
    """Return table names overlapping the normalized phrase, in table order."""
    spaced = normalized
    joined = underscored(normalized)
    return [
        name
        for name in table.names
        if spaced in name or joined in name or name in spaced or name in joined
    ]


def candidate_rank(
    normalized: str,
) -> Callable[[tuple[int, str]], tuple[int, int, int]]:
    """Build the sort key that orders substring candidates.

    Candidates are ``(table_position, name)`` pairs. Lower keys win:
    an exact spelling first, then the singular of a trailing-"s" plural,
    then the shortest name, with table position breaking remaining ties.
    """
    exact = {normalized, underscored(normalized)}
    singular = {name.removesuffix("s") for name in exact if name.endswith("s")}

    def key(candidate: tuple[int, str]) -> tuple[int, int, int]:
        position, name = candidate
        if name in exact:
            tier = 0
        elif name in singular:
            tier = 1
        else:
            tier = 2
        return tier, len(name), position

    return key


def match_substring(normalized: str, table: ReferenceTable) -> str | None:
    """Pick the best table entry that overlaps the normalized phrase."""
    candidates = substring_candidates(normalized, table)
    if not candidates:
        return None
    positions = {name: position for position, name in enumerate(table.names)}
    ranked = sorted(
        ((positions[name], name) for name in candidates),
        key=candidate_rank(normalized),
    )
    best = ranked[0][1]
    if len(ranked) > 1:
        _logger.info(
            "Multiple matches for %r, chose %r from %s",
            normalized,
            best,
            len(ranked),
        )
    return best


LOCAL_STRATEGIES: tuple[ResolverStrategy, ...] = (
    match_underscored,
    match_spaced,
    match_synonym,
    match_substring,
)


@dataclass
class IngredientResolver:
    """Maps free-text ingredient phrases to canonical reference names."""

    table: ReferenceTable
    matcher: NameMatcher | None = None
    candidate_limit: int = 100
    match_timeout_seconds: float | None = None
    strategies: tuple[ResolverStrategy, ...] = LOCAL_STRATEGIES

    async def resolve(self, raw_name: str) -> str | None:
        """Return the canonical name for a phrase, or None when unresolved."""
        if not raw_name or not raw_name.strip():
            return None
        local = self.resolve_locally(raw_name)
        if local is not None:
            return local
        assisted = await self._assisted_match(raw_name)
        if assisted is None:
            _logger.warning("No match found for ingredient: %s", raw_name)
        return assisted

    def resolve_locally(self, raw_name: str) -> str | None:
        """Run the table-only strategies in order."""
        if not raw_name or not raw_name.strip():
            return None
        normalized = normalize_name(raw_name)
        for strategy in self.strategies:
            result = strategy(normalized, self.table)
            if result is not None:
                return result
        return None

    def candidate_names(self, raw_name: str) -> list[str]:
        """Return the bounded candidate list offered to the assisted matcher."""
        names = self.table.names
        keywords = [word for word in raw_name.lower().split() if len(word) > 2]
        candidates = [
            name for name in names if any(keyword in name for keyword in keywords)
        ]
        if not candidates or len(candidates) > self.candidate_limit:
            return list(names[: self.candidate_limit])
        return candidates

    async def _assisted_match(self, raw_name: str) -> str | None:
        if self.matcher is None or len(self.table) == 0:
            return None
        candidates = self.candidate_names(raw_name)
        _logger.info("Requesting assisted match for %r", raw_name)
        try:
            response = await asyncio.wait_for(
                self.matcher.match(raw_name, candidates),
                timeout=self.match_timeout_seconds,
            )
        except Exception as exc:
            _logger.warning("Assisted match failed for %r: %s", raw_name, exc)
            return None
        best = (response or "").strip()
        if best and best.lower() != "none" and best in self.table:
            _logger.info("Assisted match: %r -> %r", raw_name, best)
            return best
        _logger.warning("Assisted match rejected for %r: %r", raw_name, best)
        return None
