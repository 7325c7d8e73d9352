"""Query domain configuration (field selection, limits, flags)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from IndexQueryTool.config.common import (
    expect_bool,
    expect_optional_int,
    expect_optional_str,
    expect_str,
    expect_str_list,
    get_optional_value,
    get_section,
)
from IndexQueryTool.core.errors import ConfigurationError
from IndexQueryTool.index.base import AnalyzerKind
from IndexQueryTool.core.regex_filter import parse_regex_option


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """Validated query settings.

    Field names are only checked for syntax here; they are validated against
    the index catalog once the index is open.
    """

    fields: tuple[str, ...]
    query_limit: int | None
    output_limit: int | None
    analyzer: str
    query_field: str | None
    regex: str | None
    show_id: bool
    show_score: bool
    show_hits: bool
    sort_fields: bool
    suppress_names: bool


def load_query(raw: Mapping[str, Any]) -> QueryConfig:
    """Load the ``query`` section.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed query configuration.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "query", required=False)
    return QueryConfig(
        fields=tuple(expect_str_list(get_optional_value(section, "fields", []), "query.fields")),
        query_limit=expect_optional_int(section.get("query_limit"), "query.query_limit"),
        output_limit=expect_optional_int(section.get("output_limit"), "query.output_limit"),
        analyzer=expect_str(get_optional_value(section, "analyzer", AnalyzerKind.KEYWORD.value), "query.analyzer"),
        query_field=expect_optional_str(section.get("query_field"), "query.query_field"),
        regex=expect_optional_str(section.get("regex"), "query.regex"),
        show_id=expect_bool(get_optional_value(section, "show_id", False), "query.show_id"),
        show_score=expect_bool(get_optional_value(section, "show_score", False), "query.show_score"),
        show_hits=expect_bool(get_optional_value(section, "show_hits", False), "query.show_hits"),
        sort_fields=expect_bool(get_optional_value(section, "sort_fields", False), "query.sort_fields"),
        suppress_names=expect_bool(get_optional_value(section, "suppress_names", False), "query.suppress_names"),
    )


def check_query(config: QueryConfig) -> None:
    """Validate query domain constraints.

    Raises:
        ValueError: If a limit is out of range, a field name is blank, the
            analyzer is unknown or the regex option is malformed.
    """
    if config.query_limit is not None and config.query_limit < 1:
        raise ValueError("query.query_limit must be at least 1")
    if config.output_limit is not None and config.output_limit < 0:
        raise ValueError("query.output_limit must not be negative")
    for idx, name in enumerate(config.fields):
        if not name.strip():
            raise ValueError(f"query.fields[{idx}] must not be empty")
    if config.query_field is not None and not config.query_field.strip():
        raise ValueError("query.query_field must not be empty")
    try:
        AnalyzerKind.from_name(config.analyzer)
        if config.regex is not None:
            parse_regex_option(config.regex)
    except ConfigurationError as exc:
        raise ValueError(f"query: {exc}") from exc
