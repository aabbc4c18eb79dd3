"""Immutable in-memory nutrition reference table."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from dish_nutrition.domain.nutrition import NutritionRecord

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceTable:
    """Canonical ingredient nutrition facts plus informal name synonyms."""

    records: tuple[NutritionRecord, ...]
    synonyms: Mapping[str, str]
    _index: Mapping[str, NutritionRecord]

    @classmethod
    def from_records(
        cls,
        records: Iterable[NutritionRecord],
        synonyms: Mapping[str, str] | None = None,
    ) -> "ReferenceTable":
        """Build a table keeping the first record for each canonical name."""
        kept: list[NutritionRecord] = []
        index: dict[str, NutritionRecord] = {}
        for record in records:
            if not record.canonical_name:
                continue
            if record.canonical_name in index:
                _logger.warning(
                    "Duplicate reference entry dropped: %s", record.canonical_name
                )
                continue
            index[record.canonical_name] = record
            kept.append(record)
        return cls(
            records=tuple(kept),
            synonyms=MappingProxyType(dict(synonyms or {})),
            _index=MappingProxyType(index),
        )

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._index

    def __len__(self) -> int:
        return len(self.records)

    @property
    def names(self) -> tuple[str, ...]:
        """Canonical names in table order."""
        return tuple(record.canonical_name for record in self.records)

    def get(self, name: str) -> NutritionRecord | None:
        """Return the record for a canonical name, if present."""
        return self._index.get(name)

    def synonym_target(self, phrase: str) -> str | None:
        """Return the synonym target for a phrase when it exists in the table."""
        target = self.synonyms.get(phrase)
        if target is None:
            return None
        if target not in self._index:
            _logger.debug("Synonym %r points to missing entry %r", phrase, target)
            return None
        return target
