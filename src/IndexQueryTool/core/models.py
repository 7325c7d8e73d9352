from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence


@dataclass(frozen=True, slots=True)
class SearchHit:
    """One ranked hit returned by the index.

    Attributes:
        docnum: Internal document number (ordinal across all segments).
        score: Relevance score assigned by the index.
    """

    docnum: int
    score: float


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Ranked hits for one query.

    Attributes:
        total_hits: Number of matching documents, not capped by the query limit.
        hits: At most ``query-limit`` hits in ranking order.
    """

    total_hits: int
    hits: Sequence[SearchHit] = ()


@dataclass(frozen=True, slots=True)
class StoredDocument:
    """Stored field values of one document.

    Attributes:
        docnum: Internal document number.
        fields: Field name to stored values, in the document's natural field
            order. Single-valued fields hold a one-element sequence.
    """

    docnum: int
    fields: Mapping[str, Sequence[str]]

    def first_value(self, name: str) -> str | None:
        """Return the first stored value of ``name``, or None when absent."""
        values = self.fields.get(name) or ()
        return values[0] if values else None


@dataclass(slots=True)
class ProjectedRow:
    """Ordered ``(name, value)`` pairs rendered for one document.

    A multi-valued field contributes one pair per value, so a name can repeat.
    """

    entries: list[tuple[str, str]] = field(default_factory=list)

    def add(self, name: str, value: str) -> None:
        self.entries.append((name, value))

    def names(self) -> list[str]:
        """Return unique names in first-seen order."""
        return list(dict.fromkeys(name for name, _ in self.entries))

    def grouped(self) -> dict[str, list[str]]:
        """Return name to values, keeping the value order of the row."""
        out: dict[str, list[str]] = {}
        for name, value in self.entries:
            out.setdefault(name, []).append(value)
        return out

    def __bool__(self) -> bool:
        return bool(self.entries)
