"""Query directive language.

The query argument is either a free query string or one of the ``%`` verbs:

- ``%all``
- ``%ids <id> [<id> ...]``
- ``%id-file <path>``
- ``%enumerate-fields``
- ``%count-fields``
- ``%enumerate-terms <field>``
- ``%script <path>``

Verbs are case-sensitive.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from IndexQueryTool.core.errors import ConfigurationError, DataAccessError


@dataclass(frozen=True, slots=True)
class FreeQuery:
    text: str


@dataclass(frozen=True, slots=True)
class MatchAll:
    pass


@dataclass(frozen=True, slots=True)
class ByIds:
    ids: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class ByIdFile:
    path: str


@dataclass(frozen=True, slots=True)
class EnumerateFields:
    pass


@dataclass(frozen=True, slots=True)
class CountFields:
    pass


@dataclass(frozen=True, slots=True)
class EnumerateTerms:
    field: str


@dataclass(frozen=True, slots=True)
class Script:
    path: str


QueryDirective = Union[
    FreeQuery,
    MatchAll,
    ByIds,
    ByIdFile,
    EnumerateFields,
    CountFields,
    EnumerateTerms,
    Script,
]

DIRECTIVE_PREFIX = "%"


def parse_directive(tokens: Sequence[str]) -> QueryDirective:
    """Parse query tokens into a directive.

    Args:
        tokens: The query argument split into tokens. The first token selects
            the directive; free query tokens are joined with single spaces.

    Returns:
        Parsed directive.

    Raises:
        ConfigurationError: If tokens are empty, the verb is unknown, or the
            verb has the wrong number of arguments.
        DataAccessError: If an id given to ``%ids`` is not an integer.
    """
    if not tokens:
        raise ConfigurationError("query is required")
    verb, args = tokens[0], list(tokens[1:])
    if not verb.startswith(DIRECTIVE_PREFIX):
        return FreeQuery(" ".join(tokens))

    if verb == "%all":
        _expect_args(verb, args, 0)
        return MatchAll()
    if verb == "%ids":
        if not args:
            raise ConfigurationError("%ids requires at least one id.")
        return ByIds(tuple(parse_ids(args)))
    if verb == "%id-file":
        _expect_args(verb, args, 1)
        return ByIdFile(args[0])
    if verb == "%enumerate-fields":
        _expect_args(verb, args, 0)
        return EnumerateFields()
    if verb == "%count-fields":
        _expect_args(verb, args, 0)
        return CountFields()
    if verb == "%enumerate-terms":
        if len(args) != 1:
            raise ConfigurationError("%enumerate-terms requires exactly one field.")
        return EnumerateTerms(args[0])
    if verb == "%script":
        if len(args) != 1:
            raise ConfigurationError("%script requires exactly one arg.")
        return Script(args[0])
    raise ConfigurationError(f"Unknown directive: {verb}")


def parse_ids(lines: Iterable[str]) -> list[int]:
    """Parse whitespace-separated document ids.

    Each item may hold several ids; blank items are skipped.

    Raises:
        DataAccessError: If a token is not an integer.
    """
    ids: list[int] = []
    for line in lines:
        for token in line.split():
            try:
                ids.append(int(token))
            except ValueError as exc:
                raise DataAccessError(f"Malformed document id: {token!r}") from exc
    return ids


def _expect_args(verb: str, args: Sequence[str], count: int) -> None:
    if len(args) != count:
        raise ConfigurationError(f"{verb} takes {count} argument(s), got {len(args)}: {list(args)}")
