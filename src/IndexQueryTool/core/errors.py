"""Error types raised while configuring and running queries."""

from __future__ import annotations

from typing import Sequence


class QueryToolError(RuntimeError):
    """Base class for every failure that aborts an invocation."""


class ConfigurationError(QueryToolError):
    """Raised when settings, field names or a query are invalid."""


class InvalidFieldNames(ConfigurationError):
    """Raised when one or more field names are not in the index.

    Attributes:
        names: Every offending name, in the order they were supplied.
    """

    def __init__(self, names: Sequence[str]) -> None:
        self.names = list(names)
        super().__init__(f"Invalid field names: {self.names}")


class QuerySyntaxError(ConfigurationError):
    """Raised when the query parser rejects the query text."""


class ScriptSyntaxError(QueryToolError):
    """Raised for a malformed script line.

    Attributes:
        path: Script file path.
        lineno: 1-based line number.
    """

    def __init__(self, path: str, lineno: int, message: str) -> None:
        self.path = path
        self.lineno = lineno
        super().__init__(f"{path}:{lineno}: {message}")


class DataAccessError(QueryToolError):
    """Raised when ids, id files, scripts or the index cannot be read."""
