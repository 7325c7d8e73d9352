"""Routing of query directives to their execution paths."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence, TextIO

from IndexQueryTool.core.directive import (
    ByIdFile,
    ByIds,
    CountFields,
    EnumerateFields,
    EnumerateTerms,
    FreeQuery,
    MatchAll,
    QueryDirective,
    Script,
    parse_directive,
    parse_ids,
)
from IndexQueryTool.core.errors import ConfigurationError, DataAccessError
from IndexQueryTool.index.base import QueryParser, SearchIndex
from IndexQueryTool.renderers import DocumentWriter, create_formatter
from IndexQueryTool.services.aggregators import count_fields, enumerate_terms
from IndexQueryTool.services.executor import QueryExecutor
from IndexQueryTool.services.projection import project_document
from IndexQueryTool.services.script import ScriptRunner
from IndexQueryTool.utils.log import log

if TYPE_CHECKING:
    from IndexQueryTool.core.settings import RunConfiguration

ID_SCORE = 1.0


class QueryDispatcher:
    """Interpret a directive and run it against the index.

    The dispatcher owns the index handle and the run configuration for one
    invocation. The configuration is frozen when the first run starts.
    """

    def __init__(
        self,
        index: SearchIndex,
        config: RunConfiguration,
        out: TextIO,
        parser: QueryParser | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            index: Index to query.
            config: Run configuration, validated against the index catalog.
            out: Default output sink; never closed by the dispatcher.
            parser: Query parser; defaults to the index's own parser.
        """
        self.index = index
        self.config = config
        self.out = out
        self.executor = QueryExecutor(index, config, parser)

    def run(self, tokens: Sequence[str], out: TextIO | None = None) -> None:
        """Parse query tokens and dispatch the resulting directive.

        Args:
            tokens: Query argument tokens, for example ``["%ids", "3"]``.
            out: Sink overriding the default one for this run.
        """
        self.dispatch(parse_directive(tokens), out)

    def dispatch(self, directive: QueryDirective, out: TextIO | None = None) -> None:
        """Run one directive.

        Raises:
            ConfigurationError: If tabular output has no field selection, or
                the directive is invalid for the configuration.
            DataAccessError: If ids or files cannot be read.
            ScriptSyntaxError: If a script line is malformed.
        """
        out = out if out is not None else self.out
        self.config.freeze()
        self._check_tabular()
        log.debug("Dispatching %r", directive)

        if isinstance(directive, FreeQuery):
            self.run_query(directive.text, out)
        elif isinstance(directive, MatchAll):
            self.run_query(None, out)
        elif isinstance(directive, ByIds):
            self._dump_ids(directive.ids, out)
        elif isinstance(directive, ByIdFile):
            self._dump_ids(parse_ids(_read_lines(directive.path)), out)
        elif isinstance(directive, EnumerateFields):
            for name in self.config.catalog.sorted_names():
                out.write(f"{name}\n")
        elif isinstance(directive, CountFields):
            for name, count in count_fields(self.index, self.config.catalog):
                out.write(f"{name}: {count}\n")
        elif isinstance(directive, EnumerateTerms):
            for term, freq in enumerate_terms(self.index, self.config.catalog, directive.field):
                out.write(f"{term} ({freq})\n")
        elif isinstance(directive, Script):
            ScriptRunner(self.run_query).run(directive.path, out)
        else:
            raise ConfigurationError(f"Unsupported directive: {directive!r}")

    def run_query(self, text: str | None, out: TextIO) -> None:
        """Execute a free query (None for match-all) with a fresh writer."""
        self.executor.execute(text, self._writer(out), self.selection())

    def selection(self) -> list[str]:
        """Return the field selection for this run, sorted with sort-fields."""
        names = list(self.config.field_names)
        return sorted(names) if self.config.sort_fields else names

    def _dump_ids(self, ids: Iterable[int], out: TextIO) -> None:
        config = self.config
        writer = self._writer(out)
        selection = self.selection()
        fields = selection or None
        for docnum in ids:
            if writer.limit_reached():
                break
            document = self.index.document(docnum, fields)
            writer.write(
                project_document(
                    document,
                    ID_SCORE,
                    selection=selection,
                    show_id=config.show_id,
                    show_score=config.show_score,
                    sort_fields=config.sort_fields,
                    tabular=config.tabular,
                )
            )

    def _writer(self, out: TextIO) -> DocumentWriter:
        formatter = create_formatter(self.config.output_format, self.config.suppress_names)
        return DocumentWriter(formatter, out, limit=self.config.output_limit)

    def _check_tabular(self) -> None:
        if self.config.tabular and not self.config.field_names:
            raise ConfigurationError("--tabular requires --fields to be passed")


def _read_lines(path: str) -> list[str]:
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.readlines()
    except OSError as exc:
        raise DataAccessError(f"Cannot read id file {path}: {exc}") from exc
