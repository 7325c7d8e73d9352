"""Multiline text formatter: one ``name: value`` line per value."""

from __future__ import annotations

from typing import Mapping, Sequence

from IndexQueryTool.renderers.base import NULL_VALUE, Formatter


class MultilineFormatter(Formatter):
    separate_documents = True

    def format(self, names: Sequence[str], data: Mapping[str, Sequence[str]]) -> str:  # noqa: A003
        lines: list[str] = []
        for name in names:
            values = data.get(name) or ()
            if len(values) == 1:
                lines.append(self._line(name, values[0]))
            elif not values:
                lines.append(self._line(name, NULL_VALUE))
            else:
                lines.extend(self._line(name, value) for value in values)
        return "\n".join(lines)

    def _line(self, name: str, value: str) -> str:
        if self.suppress_names:
            return value
        return f"{name}: {value}"
