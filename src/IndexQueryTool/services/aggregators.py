"""Aggregations over index segments.

Segments are independent partitions of the index, so a field's terms can be
split across several of them. Per-segment results are merged here:

- Field counts are summed per field.
- Term frequencies are merged with a k-way merge of the per-segment sorted
  term lists, so output order never depends on segment count or hashing.
"""

from __future__ import annotations

import heapq
from itertools import groupby
from operator import itemgetter

from IndexQueryTool.core.catalog import FieldCatalog
from IndexQueryTool.core.errors import ConfigurationError
from IndexQueryTool.index.base import SearchIndex
from IndexQueryTool.utils.log import log


def count_fields(index: SearchIndex, catalog: FieldCatalog) -> list[tuple[str, int]]:
    """Count documents holding at least one indexed value, per field.

    Args:
        index: Index to scan.
        catalog: Fields to count; reported in sorted order.

    Returns:
        ``(field, count)`` pairs; unindexed fields count 0.
    """
    segments = index.segments()
    counts: list[tuple[str, int]] = []
    for field in catalog.sorted_names():
        total = 0
        for segment in segments:
            count = segment.doc_count(field)
            if count is not None:
                total += count
        counts.append((field, total))
    log.debug("Counted %d fields over %d segments", len(counts), len(segments))
    return counts


def enumerate_terms(index: SearchIndex, catalog: FieldCatalog, field: str) -> list[tuple[str, int]]:
    """Return every term of ``field`` with its document frequency.

    Args:
        index: Index to scan.
        catalog: Catalog used to validate ``field``.
        field: Field whose terms are enumerated.

    Returns:
        ``(term, doc_frequency)`` pairs in lexicographic term order,
        frequencies summed across segments.

    Raises:
        InvalidFieldNames: If ``field`` is unknown.
        ConfigurationError: If no segment holds terms for ``field``.
    """
    catalog.validate([field])
    partials = [terms for terms in (segment.terms(field) for segment in index.segments()) if terms]
    if not partials:
        raise ConfigurationError(f"Unindexed field: {field}")
    merged = heapq.merge(*partials, key=itemgetter(0))
    return [(term, sum(freq for _, freq in group)) for term, group in groupby(merged, key=itemgetter(0))]
