"""Read-only adapter over one or more Whoosh indexes on disk.

Several indexes are searched together through one ``MultiReader`` over the
segments of all of them: document numbers are global, in the order the
indexes were given, and the field catalog is the union of their schemas.
"""

from __future__ import annotations

from operator import itemgetter
from pathlib import Path
from typing import Any, Iterable, Sequence

from whoosh import index as whoosh_index
from whoosh.fields import Schema
from whoosh.index import Index
from whoosh.reading import IndexReader, MultiReader
from whoosh.searching import Searcher

from IndexQueryTool.core.errors import DataAccessError
from IndexQueryTool.core.models import SearchHit, SearchResult, StoredDocument
from IndexQueryTool.index.query_parser import SchemaQueryParser
from IndexQueryTool.utils.log import log


def _stored_values(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


class WhooshSegment:
    """One leaf reader of a Whoosh index."""

    def __init__(self, reader: IndexReader, schema: Any) -> None:
        self._reader = reader
        self._schema = schema

    def terms(self, field: str) -> list[tuple[str, int]] | None:
        if not self._indexed(field):
            return None
        fieldobj = self._schema[field]
        pairs = [
            (str(fieldobj.from_bytes(termbytes)), terminfo.doc_frequency())
            for termbytes, terminfo in self._reader.iter_field(field)
        ]
        if not pairs:
            return None
        pairs.sort(key=itemgetter(0))
        return pairs

    def doc_count(self, field: str) -> int | None:
        if not self._indexed(field):
            return None
        docnums: set[int] = set()
        seen_terms = False
        for termbytes, _ in self._reader.iter_field(field):
            seen_terms = True
            docnums.update(self._reader.postings(field, termbytes).all_ids())
        return len(docnums) if seen_terms else None

    def _indexed(self, field: str) -> bool:
        return field in self._schema and bool(self._schema[field].indexed)


def _union_schema(schemas: Iterable[Schema]) -> Schema:
    """Merge schemas; the first one defining a field decides its type."""
    union = Schema()
    for schema in schemas:
        for name, fieldobj in schema.items():
            if name not in union:
                union.add(name, fieldobj)
    return union


def _open_reader(indexes: Sequence[Index], schema: Schema) -> IndexReader:
    if len(indexes) == 1:
        return indexes[0].reader()
    leaves = [leaf for ix in indexes for leaf, _ in ix.reader().leaf_readers()]
    reader = MultiReader(leaves)
    # MultiReader takes the first leaf's schema; queries must see every field
    reader.schema = schema
    return reader


def _open_dir(path: Path) -> Index:
    if not path.is_dir() or not whoosh_index.exists_in(str(path)):
        raise DataAccessError(f"No index found at {path}")
    return whoosh_index.open_dir(str(path), readonly=True)


class WhooshIndex:
    """Searcher-backed index handle.

    Holds one searcher for the lifetime of an invocation. Supports the context
    manager protocol so the searcher is always closed.
    """

    def __init__(self, indexes: Sequence[Index]) -> None:
        """Open one searcher over all of ``indexes``.

        Args:
            indexes: Opened Whoosh indexes, at least one.

        Raises:
            ValueError: If ``indexes`` is empty.
        """
        if not indexes:
            raise ValueError("At least one index is required")
        self._indexes = list(indexes)
        if len(self._indexes) == 1:
            self._schema = self._indexes[0].schema
        else:
            self._schema = _union_schema(ix.schema for ix in self._indexes)
        self._searcher = Searcher(_open_reader(self._indexes, self._schema))
        self._parser: SchemaQueryParser | None = None

    @classmethod
    def open_all(cls, paths: Sequence[str | Path]) -> WhooshIndex:
        """Open the indexes stored in ``paths`` and search them as one.

        Raises:
            DataAccessError: If no path is given or a path holds no index.
        """
        if not paths:
            raise DataAccessError("No index path given")
        dirs = [Path(path) for path in paths]
        handle = cls([_open_dir(path) for path in dirs])
        log.info(
            "Opened %s (%d docs, %d fields)",
            ", ".join(str(path) for path in dirs),
            handle.doc_count_all(),
            len(handle.field_names()),
        )
        return handle

    def field_names(self) -> list[str]:
        return list(self._schema.names())

    def doc_count_all(self) -> int:
        return self._searcher.doc_count_all()

    def search(self, query: Any, limit: int | None) -> SearchResult:
        results = self._searcher.search(query, limit=limit)
        hits = [
            SearchHit(docnum=hit.docnum, score=float(hit.score) if hit.score is not None else 0.0)
            for hit in results
        ]
        log.debug("Query %s matched %d documents, %d retrieved", query, len(results), len(hits))
        return SearchResult(total_hits=len(results), hits=hits)

    def document(self, docnum: int, fields: Iterable[str] | None = None) -> StoredDocument:
        if not 0 <= docnum < self.doc_count_all():
            raise DataAccessError(f"Document id out of range: {docnum}")
        if self._searcher.reader().is_deleted(docnum):
            raise DataAccessError(f"Document id is deleted: {docnum}")
        stored = self._searcher.stored_fields(docnum)
        wanted = set(fields) if fields is not None else None
        values = {
            name: _stored_values(value)
            for name, value in stored.items()
            if wanted is None or name in wanted
        }
        return StoredDocument(docnum=docnum, fields={name: vals for name, vals in values.items() if vals})

    def segments(self) -> Sequence[WhooshSegment]:
        return [WhooshSegment(reader, reader.schema) for reader, _ in self._searcher.reader().leaf_readers()]

    def query_parser(self) -> SchemaQueryParser:
        if self._parser is None:
            self._parser = SchemaQueryParser(self._schema)
        return self._parser

    def close(self) -> None:
        self._searcher.close()

    def __enter__(self) -> WhooshIndex:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
