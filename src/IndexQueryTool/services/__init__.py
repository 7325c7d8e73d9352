"""Query services: dispatch, execution, aggregation, projection and scripts."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from IndexQueryTool.index.base import SearchIndex
from IndexQueryTool.services.dispatcher import QueryDispatcher

if TYPE_CHECKING:
    from IndexQueryTool.core.settings import RunConfiguration


def create_dispatcher(index: SearchIndex, config: RunConfiguration, out: TextIO) -> QueryDispatcher:
    """Create a dispatcher bound to an index, a configuration and a sink.

    Args:
        index: Opened index.
        config: Validated run configuration.
        out: Default output sink.

    Returns:
        QueryDispatcher instance.
    """
    return QueryDispatcher(index, config, out)


__all__ = ["QueryDispatcher", "create_dispatcher"]
