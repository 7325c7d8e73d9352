"""Batch execution of query scripts.

A script holds one command per non-blank line, tokenized with shell-like
quoting:

    -q 'context:bush' -o out1.txt
    -q context:clinton

Only ``-q`` (also ``-query``/``--query``) and ``-o`` (also
``-output``/``--output``) are accepted. ``%`` verbs are not allowed, so a
script cannot recurse into another script or into enumeration modes.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, TextIO

from IndexQueryTool.core.directive import DIRECTIVE_PREFIX
from IndexQueryTool.core.errors import DataAccessError, ScriptSyntaxError
from IndexQueryTool.utils.log import log

QUERY_SWITCHES = ("-q", "-query", "--query")
OUTPUT_SWITCHES = ("-o", "-output", "--output")


@dataclass(frozen=True, slots=True)
class ScriptLine:
    """One parsed script command.

    Attributes:
        lineno: 1-based line number in the script.
        query: Query text.
        output: Redirection path, or None for the default sink.
    """

    lineno: int
    query: str
    output: str | None = None


def parse_script_line(path: str, lineno: int, line: str) -> ScriptLine:
    """Parse one non-blank script line.

    Raises:
        ScriptSyntaxError: For unbalanced quoting, an unsupported switch, a
            switch without a value, a ``%`` query or a missing query.
    """
    try:
        args = shlex.split(line)
    except ValueError as exc:
        raise ScriptSyntaxError(path, lineno, str(exc)) from exc

    query: str | None = None
    output: str | None = None
    i = 0
    while i < len(args):
        arg = args[i]
        if arg not in QUERY_SWITCHES and arg not in OUTPUT_SWITCHES:
            raise ScriptSyntaxError(path, lineno, "script supports only -q and -o")
        if i + 1 >= len(args):
            raise ScriptSyntaxError(path, lineno, f"{arg} requires a value")
        value = args[i + 1]
        if arg in OUTPUT_SWITCHES:
            output = value
        else:
            if value.startswith(DIRECTIVE_PREFIX):
                raise ScriptSyntaxError(path, lineno, "script does not support % queries")
            query = value
        i += 2

    if query is None:
        raise ScriptSyntaxError(path, lineno, "script line requires -q")
    return ScriptLine(lineno=lineno, query=query, output=output)


def read_script(path: str) -> Iterator[ScriptLine]:
    """Yield the parsed commands of the script at ``path``.

    Raises:
        DataAccessError: If the file cannot be read.
        ScriptSyntaxError: For the first malformed line.
    """
    try:
        with open(path, encoding="utf-8") as handle:
            lines = handle.readlines()
    except OSError as exc:
        raise DataAccessError(f"Cannot read script {path}: {exc}") from exc
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        yield parse_script_line(path, lineno, line)


class ScriptRunner:
    """Run script lines one after another through a query callback.

    Every line shares the run configuration of the caller; only the query text
    and output sink change. A failing line aborts the rest of the script.
    """

    def __init__(self, run_query: Callable[[str, TextIO], None]) -> None:
        """Initialize the runner.

        Args:
            run_query: Executes one query text against a sink.
        """
        self.run_query = run_query

    def run(self, path: str, default_out: TextIO) -> int:
        """Execute every line of the script.

        Args:
            path: Script file.
            default_out: Sink for lines without ``-o``; never closed here.

        Returns:
            Number of lines executed.
        """
        executed = 0
        for command in read_script(path):
            log.debug("%s:%d: running %r", path, command.lineno, command.query)
            if command.output is None:
                self.run_query(command.query, default_out)
            else:
                Path(command.output).parent.mkdir(parents=True, exist_ok=True)
                with open(command.output, "w", encoding="utf-8") as out:
                    self.run_query(command.query, out)
            executed += 1
        log.info("Script %s ran %d queries", path, executed)
        return executed
