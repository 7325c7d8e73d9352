"""JSON formatters.

Renders one document as a JSON object keyed by field name:

- one value: the value itself
- no value: the string ``"null"``
- several values: an array

Compact output prints one object per line; pretty output indents by two
spaces and separates objects with an empty line.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from IndexQueryTool.renderers.base import NULL_VALUE, Formatter


def document_payload(names: Sequence[str], data: Mapping[str, Sequence[str]]) -> dict[str, Any]:
    """Build the JSON-serializable object for one document.

    Args:
        names: Field names in output order.
        data: Field name to values.

    Returns:
        Ordered mapping of field name to scalar or list.
    """
    payload: dict[str, Any] = {}
    for name in names:
        values = list(data.get(name) or ())
        if len(values) == 1:
            payload[name] = values[0]
        elif not values:
            payload[name] = NULL_VALUE
        else:
            payload[name] = values
    return payload


class JsonFormatter(Formatter):
    """Render documents as JSON objects; field names are always emitted."""

    def __init__(self, pretty: bool = False) -> None:
        super().__init__(suppress_names=False)
        self.pretty = pretty
        self.separate_documents = pretty

    def format(self, names: Sequence[str], data: Mapping[str, Sequence[str]]) -> str:  # noqa: A003
        payload = document_payload(names, data)
        if self.pretty:
            return json.dumps(payload, ensure_ascii=False, indent=2)
        return json.dumps(payload, ensure_ascii=False)
