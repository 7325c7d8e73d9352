"""Base classes for document formatters and the document writer.

A formatter turns one projected document into text. The writer owns the
output sink and the per-run state around documents: the documents-printed
counter, the output limit, the tabular header and the separators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Mapping, Sequence, TextIO

from IndexQueryTool.core.errors import ConfigurationError
from IndexQueryTool.core.models import ProjectedRow

NULL_VALUE = "null"


class OutputFormat(str, Enum):
    """Supported output formats, keyed by their CLI name."""

    MULTILINE = "multiline"
    TABULAR = "tabular"
    JSON = "json"
    JSON_PRETTY = "json-pretty"

    @classmethod
    def from_name(cls, name: str | OutputFormat) -> OutputFormat:
        """Resolve a format from its name.

        Raises:
            ConfigurationError: If the name is not a supported format.
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError as exc:
            allowed = [fmt.value for fmt in cls]
            raise ConfigurationError(f"Unsupported format: {name} (expected one of {allowed})") from exc


class Formatter(ABC):
    """Abstract base class for document formatters."""

    #: Print an empty line between consecutive documents.
    separate_documents = False

    def __init__(self, suppress_names: bool = False) -> None:
        self.suppress_names = suppress_names

    @abstractmethod
    def format(self, names: Sequence[str], data: Mapping[str, Sequence[str]]) -> str:  # noqa: A003
        """Format one document.

        Args:
            names: Field names in output order. Every name is a key of
                ``data`` even when it maps to zero or several values.
            data: Field name to values.

        Returns:
            Formatted document without a trailing newline.
        """

    def header(self, names: Sequence[str]) -> str | None:
        """Return a line to print before the first document, if any."""
        return None


class DocumentWriter:
    """Write formatted documents to a sink for a single run.

    A new writer is created for every top-level invocation and every script
    line, so the documents-printed counter always starts at zero.
    """

    def __init__(self, formatter: Formatter, out: TextIO, *, limit: int | None = None) -> None:
        """Initialize the writer.

        Args:
            formatter: Formatter for each document.
            out: Output sink; never closed by the writer.
            limit: Maximum number of documents to print, None for no limit.
        """
        self.formatter = formatter
        self.out = out
        self.limit = limit
        self.docs_printed = 0
        self._header_written = False

    def limit_reached(self) -> bool:
        return self.limit is not None and self.docs_printed >= self.limit

    def write_total_hits(self, total_hits: int) -> None:
        self.out.write(f"totalHits: {total_hits}\n\n")

    def write(self, row: ProjectedRow) -> bool:
        """Format and print one document.

        Args:
            row: Projected document.

        Returns:
            True if the document was printed, False for an empty row.
        """
        if not row:
            return False
        names = row.names()
        if not self._header_written:
            header = self.formatter.header(names)
            if header is not None:
                self.out.write(header + "\n")
            self._header_written = True
        formatted = self.formatter.format(names, row.grouped())
        if not formatted:
            return False
        if self.docs_printed > 0 and self.formatter.separate_documents:
            self.out.write("\n")
        self.out.write(formatted + "\n")
        self.docs_printed += 1
        return True


def single_value(name: str, values: Sequence[str]) -> str:
    """Return the only value of a field for one-value-per-field formats.

    Raises:
        ConfigurationError: If the field holds several values.
    """
    if not values:
        return NULL_VALUE
    if len(values) > 1:
        raise ConfigurationError(f"Multivalued field '{name}' not allowed with tabular format")
    return values[0]
