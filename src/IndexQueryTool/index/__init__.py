"""Index adapters.

The services consume the protocols in ``IndexQueryTool.index.base``; the only
concrete adapter reads one or more Whoosh indexes from disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from IndexQueryTool.index.base import AnalyzerKind, IndexSegment, QueryParser, SearchIndex
from IndexQueryTool.index.whoosh_index import WhooshIndex


def open_index(paths: Sequence[str | Path]) -> WhooshIndex:
    """Open the indexes at ``paths`` for reading, searched as one.

    Raises:
        DataAccessError: If no path is given or a path holds no index.
    """
    return WhooshIndex.open_all(paths)


__all__ = [
    "AnalyzerKind",
    "IndexSegment",
    "QueryParser",
    "SearchIndex",
    "WhooshIndex",
    "open_index",
]
