"""Tab separated formatter: a header row, then one row per document.

Rows only line up when every field has exactly one value, so the projection
step rejects multi-valued fields before they reach this formatter.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from IndexQueryTool.renderers.base import Formatter, single_value


class TabularFormatter(Formatter):
    def header(self, names: Sequence[str]) -> str | None:
        if self.suppress_names:
            return None
        return "\t".join(names)

    def format(self, names: Sequence[str], data: Mapping[str, Sequence[str]]) -> str:  # noqa: A003
        return "\t".join(single_value(name, data.get(name) or ()) for name in names)
