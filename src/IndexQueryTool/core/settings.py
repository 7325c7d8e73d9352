"""Run configuration shared by every component of one invocation."""

from __future__ import annotations

import re
from typing import Iterable

from IndexQueryTool.core.catalog import FieldCatalog
from IndexQueryTool.core.errors import ConfigurationError
from IndexQueryTool.core.regex_filter import RegexFilter, compile_pattern
from IndexQueryTool.index.base import AnalyzerKind
from IndexQueryTool.renderers.base import OutputFormat


class RunConfiguration:
    """Settings for one invocation, validated against the field catalog.

    Every setter validates eagerly: unknown field names are rejected when they
    are set, never later while rendering. The configuration is mutable until
    the dispatcher starts its first run, then frozen.
    """

    def __init__(self, catalog: FieldCatalog) -> None:
        self.catalog = catalog
        self._field_names: list[str] = []
        self._query_limit: int | None = None
        self._output_limit: int | None = None
        self._regex: RegexFilter | None = None
        self._default_field: str | None = None
        self._analyzer = AnalyzerKind.KEYWORD
        self._output_format = OutputFormat.MULTILINE
        self._show_id = False
        self._show_score = False
        self._show_hits = False
        self._sort_fields = False
        self._suppress_names = False
        self._frozen = False

    # -- read access ----------------------------------------------------

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._field_names)

    @property
    def query_limit(self) -> int | None:
        return self._query_limit

    @property
    def output_limit(self) -> int | None:
        return self._output_limit

    @property
    def regex(self) -> RegexFilter | None:
        return self._regex

    @property
    def default_field(self) -> str | None:
        return self._default_field

    @property
    def analyzer(self) -> AnalyzerKind:
        return self._analyzer

    @property
    def output_format(self) -> OutputFormat:
        return self._output_format

    @property
    def tabular(self) -> bool:
        return self._output_format is OutputFormat.TABULAR

    @property
    def show_id(self) -> bool:
        return self._show_id

    @property
    def show_score(self) -> bool:
        return self._show_score

    @property
    def show_hits(self) -> bool:
        return self._show_hits

    @property
    def sort_fields(self) -> bool:
        return self._sort_fields

    @property
    def suppress_names(self) -> bool:
        return self._suppress_names

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject further changes; called when the first run starts."""
        self._frozen = True

    # -- setters --------------------------------------------------------

    def set_field_names(self, names: Iterable[str]) -> None:
        """Select the fields to output, in order.

        Raises:
            InvalidFieldNames: If any name is unknown (all are reported).
            ConfigurationError: If a regex filter field is outside the new
                selection.
        """
        self._check_mutable()
        selection = list(dict.fromkeys(names))
        self.catalog.validate(selection)
        if self._regex is not None and selection and self._regex.field not in selection:
            raise ConfigurationError(f"Attempted to apply regex to field not in results: {self._regex.field}")
        self._field_names = selection

    def set_regex(self, field: str, pattern: str | re.Pattern[str]) -> None:
        """Set the post-retrieval regex filter, replacing any previous one.

        Raises:
            InvalidFieldNames: If the field is unknown.
            ConfigurationError: If the field is outside a non-empty selection
                or the pattern does not compile.
        """
        self._check_mutable()
        self.catalog.validate([field])
        if self._field_names and field not in self._field_names:
            raise ConfigurationError(f"Attempted to apply regex to field not in results: {field}")
        self._regex = RegexFilter(field=field, pattern=compile_pattern(pattern))

    def set_default_field(self, field: str | None) -> None:
        self._check_mutable()
        if field is not None:
            self.catalog.validate([field])
        self._default_field = field

    def set_analyzer(self, analyzer: str | AnalyzerKind) -> None:
        self._check_mutable()
        self._analyzer = AnalyzerKind.from_name(analyzer)

    def set_query_limit(self, limit: int | None) -> None:
        """Set the maximum number of hits considered; None means unbounded.

        Raises:
            ConfigurationError: If the limit is below 1.
        """
        self._check_mutable()
        if limit is not None and limit < 1:
            raise ConfigurationError(f"query-limit must be at least 1, got {limit}")
        self._query_limit = limit

    def set_output_limit(self, limit: int | None) -> None:
        """Set the maximum number of documents printed; None means unbounded.

        Raises:
            ConfigurationError: If the limit is negative.
        """
        self._check_mutable()
        if limit is not None and limit < 0:
            raise ConfigurationError(f"output-limit must not be negative, got {limit}")
        self._output_limit = limit

    def set_output_format(self, output_format: str | OutputFormat) -> None:
        self._check_mutable()
        self._output_format = OutputFormat.from_name(output_format)

    def set_tabular(self, tabular: bool) -> None:
        self._check_mutable()
        if tabular:
            self._output_format = OutputFormat.TABULAR
        elif self.tabular:
            self._output_format = OutputFormat.MULTILINE

    def set_show_id(self, show_id: bool) -> None:
        self._check_mutable()
        self._show_id = show_id

    def set_show_score(self, show_score: bool) -> None:
        self._check_mutable()
        self._show_score = show_score

    def set_show_hits(self, show_hits: bool) -> None:
        self._check_mutable()
        self._show_hits = show_hits

    def set_sort_fields(self, sort_fields: bool) -> None:
        self._check_mutable()
        self._sort_fields = sort_fields

    def set_suppress_names(self, suppress_names: bool) -> None:
        self._check_mutable()
        self._suppress_names = suppress_names

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ConfigurationError("Run configuration cannot change once a query has run")
