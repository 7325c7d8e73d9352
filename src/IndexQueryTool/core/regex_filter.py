"""Post-retrieval regex filter.

Unlike regex terms inside a query (matched by the index against its term
dictionary), this filter runs after a document is fetched and tests the stored
value of a single field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from IndexQueryTool.core.errors import ConfigurationError
from IndexQueryTool.core.models import StoredDocument

_OPTION_RE = re.compile(r"^(.*?):/(.*)/$", re.DOTALL)


@dataclass(frozen=True, slots=True)
class RegexFilter:
    """Full-match filter on the first stored value of one field."""

    field: str
    pattern: re.Pattern[str]

    def matches(self, document: StoredDocument) -> bool:
        """Return True if the whole stored value matches the pattern.

        A document without a value for the field never matches.
        """
        value = document.first_value(self.field)
        return value is not None and self.pattern.fullmatch(value) is not None


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile ``pattern`` unless it is already compiled.

    Raises:
        ConfigurationError: If the pattern is not a valid regular expression.
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"Invalid regex /{pattern}/: {exc}") from exc


def parse_regex_option(text: str) -> tuple[str, re.Pattern[str]]:
    """Split ``field:/pattern/`` into a field name and compiled pattern.

    Raises:
        ConfigurationError: If the text does not follow the syntax or the
            pattern does not compile.
    """
    match = _OPTION_RE.match(text)
    if match is None or not match.group(1):
        raise ConfigurationError(f"Invalid regex {text!r}, should be field:/regex/")
    return match.group(1), compile_pattern(match.group(2))
