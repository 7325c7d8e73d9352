"""Output formatters for query results.

Provides the Formatter abstraction, one implementation per output format,
the DocumentWriter that prints formatted documents to a sink, and a factory
that instantiates a formatter for a configured format.
"""

from __future__ import annotations

from IndexQueryTool.renderers.base import DocumentWriter, Formatter, OutputFormat
from IndexQueryTool.renderers.json import JsonFormatter, document_payload
from IndexQueryTool.renderers.multiline import MultilineFormatter
from IndexQueryTool.renderers.tabular import TabularFormatter


def create_formatter(output_format: OutputFormat | str, suppress_names: bool = False) -> Formatter:
    """Create a formatter for the given output format.

    Args:
        output_format: Output format or its name.
        suppress_names: Omit field names where the format allows it.

    Returns:
        Formatter instance for the format.
    """
    fmt = OutputFormat.from_name(output_format)
    if fmt is OutputFormat.MULTILINE:
        return MultilineFormatter(suppress_names)
    if fmt is OutputFormat.TABULAR:
        return TabularFormatter(suppress_names)
    if fmt is OutputFormat.JSON:
        return JsonFormatter(pretty=False)
    if fmt is OutputFormat.JSON_PRETTY:
        return JsonFormatter(pretty=True)
    raise ValueError(f"Unsupported format: {fmt}")


__all__ = [
    "DocumentWriter",
    "Formatter",
    "JsonFormatter",
    "MultilineFormatter",
    "OutputFormat",
    "TabularFormatter",
    "create_formatter",
    "document_payload",
]
