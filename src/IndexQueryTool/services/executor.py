"""Execution of free-text and match-all queries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from IndexQueryTool.core.errors import ConfigurationError, InvalidFieldNames, QuerySyntaxError
from IndexQueryTool.index.base import QueryParser, SearchIndex
from IndexQueryTool.renderers.base import DocumentWriter
from IndexQueryTool.services.projection import project_document
from IndexQueryTool.utils.log import log

if TYPE_CHECKING:
    from IndexQueryTool.core.settings import RunConfiguration

FIELD_DELIMITER = ":"


class QueryExecutor:
    """Parse, validate and run a query, then write every accepted hit."""

    def __init__(self, index: SearchIndex, config: RunConfiguration, parser: QueryParser | None = None) -> None:
        self.index = index
        self.config = config
        self.parser = parser if parser is not None else index.query_parser()

    def build_query(self, text: str | None):
        """Turn query text into an executable query.

        Args:
            text: Query text, or None to match every document.

        Returns:
            Parsed query.

        Raises:
            ConfigurationError: If the text names no field and no default field
                is configured.
            InvalidFieldNames: If the query references unknown fields.
            QuerySyntaxError: If the text cannot be parsed, or a term is left
                outside every field clause.
        """
        if text is None:
            return self.parser.match_all()
        if FIELD_DELIMITER not in text and self.config.default_field is None:
            raise ConfigurationError("query has no ':' and no query-field defined")

        query = self.parser.parse(text, self.config.default_field, self.config.analyzer)
        referenced = list(self.parser.referenced_fields(query))
        if None in referenced:
            # the text has a ':' here, so a field-less term is a leftover word
            raise QuerySyntaxError(
                f"Malformed query {text!r}: a term is outside any field clause"
                " (dangling operator or unterminated range?)"
            )
        invalid = [name for name in dict.fromkeys(referenced) if name not in self.config.catalog]
        if invalid:
            raise InvalidFieldNames(invalid)
        return query

    def execute(self, text: str | None, writer: DocumentWriter, selection: Sequence[str]) -> int:
        """Run a query and write matching documents.

        Args:
            text: Query text, or None for match-all.
            writer: Writer for this run; its limit is the output limit.
            selection: Field selection for this run, possibly empty.

        Returns:
            Number of documents written.
        """
        config = self.config
        query = self.build_query(text)
        result = self.index.search(query, config.query_limit)
        log.info("Query %r: %d total hits, %d retrieved", text, result.total_hits, len(result.hits))
        if config.show_hits:
            writer.write_total_hits(result.total_hits)

        fields = list(selection) or None
        for hit in result.hits:
            if writer.limit_reached():
                break
            document = self.index.document(hit.docnum, fields)
            if config.regex is not None and not config.regex.matches(document):
                continue
            row = project_document(
                document,
                hit.score,
                selection=selection,
                show_id=config.show_id,
                show_score=config.show_score,
                sort_fields=config.sort_fields,
                tabular=config.tabular,
            )
            writer.write(row)
        return writer.docs_printed
