"""Query parsing on top of the Whoosh query parser.

The analyzer chosen for the run replaces the analyzer of every analyzable
field at parse time, mirroring how a single query-time analyzer behaves:

- Keyword: the whole term text is one token, case preserved.
- Standard: text is tokenized and lowercased.

Field names may contain ``-`` and ``.``. Unknown field names are kept as
fields instead of being folded into the default field, so they can be
reported as invalid. Stored-only fields are left out of the parse-time
schema: their terms stay unanalyzed and match no document.
"""

from __future__ import annotations

import copy
from typing import Iterator

from whoosh import analysis
from whoosh import query as wquery
from whoosh.fields import Schema
from whoosh.qparser import QueryParser as WhooshQueryParser
from whoosh.qparser.common import QueryParserError
from whoosh.qparser.plugins import FieldsPlugin, RegexPlugin

from IndexQueryTool.core.errors import QuerySyntaxError
from IndexQueryTool.index.base import AnalyzerKind
from IndexQueryTool.utils.log import log

_FIELDNAME_EXPR = r"(?P<text>\w[\w.-]*):"


def _analyzer_for(kind: AnalyzerKind) -> analysis.Analyzer:
    if kind is AnalyzerKind.STANDARD:
        return analysis.StandardAnalyzer()
    return analysis.IDTokenizer()


class SchemaQueryParser:
    """Parse query text against a Whoosh schema."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self._query_schemas: dict[AnalyzerKind, Schema] = {}

    def parse(self, text: str, default_field: str | None, analyzer: AnalyzerKind) -> wquery.Query:
        """Parse and normalize ``text``.

        Args:
            text: Query text in Whoosh syntax.
            default_field: Field for terms without a ``field:`` prefix.
            analyzer: Analyzer applied to term text.

        Returns:
            Normalized Whoosh query.

        Raises:
            QuerySyntaxError: If Whoosh rejects the query.
        """
        parser = WhooshQueryParser(default_field, self._query_schema(analyzer))
        parser.replace_plugin(FieldsPlugin(expr=_FIELDNAME_EXPR, remove_unknown=False))
        parser.add_plugin(RegexPlugin())
        try:
            parsed = parser.parse(text)
        except QueryParserError as exc:
            raise QuerySyntaxError(f"Cannot parse query {text!r}: {exc}") from exc
        log.debug("Parsed query %r as %r", text, parsed)
        return parsed

    def match_all(self) -> wquery.Query:
        return wquery.Every()

    def referenced_fields(self, query: wquery.Query) -> Iterator[str | None]:
        for leaf in query.leaves():
            if leaf is wquery.NullQuery:
                continue
            if isinstance(leaf, wquery.Every) and leaf.field() is None:
                continue
            yield leaf.field()

    def _query_schema(self, kind: AnalyzerKind) -> Schema:
        """Return a copy of the schema with analyzers replaced for ``kind``."""
        schema = self._query_schemas.get(kind)
        if schema is not None:
            return schema
        schema = Schema()
        for name, fieldobj in self.schema.items():
            if not fieldobj.indexed:
                continue
            if getattr(fieldobj, "analyzer", None) is not None and not fieldobj.self_parsing():
                fieldobj = copy.copy(fieldobj)
                fieldobj.analyzer = _analyzer_for(kind)
            schema.add(name, fieldobj)
        self._query_schemas[kind] = schema
        return schema
