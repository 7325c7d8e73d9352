"""Read-only index interfaces consumed by the query services.

The services never touch the search library directly: they go through these
protocols, so the dispatcher, projection and aggregators can be exercised
against stub indexes in tests.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Protocol, Sequence

from IndexQueryTool.core.errors import ConfigurationError
from IndexQueryTool.core.models import SearchResult, StoredDocument


class AnalyzerKind(str, Enum):
    """Analyzer applied to query text at parse time."""

    KEYWORD = "KeywordAnalyzer"
    STANDARD = "StandardAnalyzer"

    @classmethod
    def from_name(cls, name: str | AnalyzerKind) -> AnalyzerKind:
        """Resolve ``Keyword``/``KeywordAnalyzer``/``Standard``/``StandardAnalyzer``.

        Matching is case-insensitive.

        Raises:
            ConfigurationError: For any other name.
        """
        if isinstance(name, cls):
            return name
        normalized = str(name).strip().lower()
        for kind in cls:
            full = kind.value.lower()
            if normalized in (full, full.removesuffix("analyzer")):
                return kind
        raise ConfigurationError(
            f"Invalid analyzer {name}: Only KeywordAnalyzer and StandardAnalyzer currently supported"
        )


class IndexSegment(Protocol):
    """One independently searchable partition of the index."""

    def terms(self, field: str) -> Sequence[tuple[str, int]] | None:
        """Return ``(term, doc_frequency)`` pairs sorted by term text.

        Returns None when the segment has no term dictionary for the field.
        """
        raise NotImplementedError

    def doc_count(self, field: str) -> int | None:
        """Return the number of documents with at least one term in the field.

        Returns None when the segment has no term dictionary for the field.
        """
        raise NotImplementedError


class QueryParser(Protocol):
    """Turns query text into an executable query object."""

    def parse(self, text: str, default_field: str | None, analyzer: AnalyzerKind) -> Any:
        """Parse query text.

        Raises:
            QuerySyntaxError: If the text is malformed.
        """
        raise NotImplementedError

    def match_all(self) -> Any:
        """Return a query matching every document."""
        raise NotImplementedError

    def referenced_fields(self, query: Any) -> Iterable[str | None]:
        """Yield the field of every leaf query; None for a leaf without one."""
        raise NotImplementedError


class SearchIndex(Protocol):
    """Read-only handle on a searchable index."""

    def field_names(self) -> Sequence[str]:
        """Return every field name, including stored-only fields."""
        raise NotImplementedError

    def doc_count_all(self) -> int:
        """Return the number of document slots (the exclusive upper docnum)."""
        raise NotImplementedError

    def search(self, query: Any, limit: int | None) -> SearchResult:
        """Run a query and return at most ``limit`` ranked hits."""
        raise NotImplementedError

    def document(self, docnum: int, fields: Iterable[str] | None = None) -> StoredDocument:
        """Fetch stored values, optionally restricted to ``fields``.

        Raises:
            DataAccessError: If the document number is out of range.
        """
        raise NotImplementedError

    def segments(self) -> Sequence[IndexSegment]:
        """Return the index segments in a stable order."""
        raise NotImplementedError

    def query_parser(self) -> QueryParser:
        """Return a parser bound to this index's schema."""
        raise NotImplementedError
