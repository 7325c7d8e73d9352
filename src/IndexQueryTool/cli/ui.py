"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv

from IndexQueryTool.cli.runner import CommandRunner
from IndexQueryTool.config import load_raw_config, merge_config_dicts, parse_config_dict
from IndexQueryTool.renderers.base import OutputFormat

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group(help="IndexQueryTool: query a read-only search index and print documents.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to YAML config file, merged over the built-in defaults.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
    """
    # Load environment variables from .env file, so IQT_INDEX may live there
    load_dotenv()

    try:
        ctx.obj = load_raw_config(config_path)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


@cli.command("query")
@click.option(
    "-i",
    "--index",
    "index_paths",
    multiple=True,
    envvar="IQT_INDEX",
    type=click.Path(file_okay=False),
    help="Index directory. Repeat to search several indexes as one; IQT_INDEX takes a path list.",
)
@click.option(
    "--fields",
    multiple=True,
    help="Fields to print, in order. Repeatable; comma-separated lists are split.",
)
@click.option("--query-limit", type=int, default=None, help="Maximum number of hits considered.")
@click.option("--output-limit", type=int, default=None, help="Maximum number of documents printed.")
@click.option("--analyzer", default=None, help="Query analyzer: Keyword or Standard.")
@click.option("--query-field", default=None, help="Default field for query terms without 'field:'.")
@click.option("--regex", default=None, help="Post-retrieval filter, as field:/regex/.")
@click.option("--show-id/--no-show-id", default=None, help="Print the internal document id.")
@click.option("--show-score/--no-show-score", default=None, help="Print the hit score.")
@click.option("--show-hits/--no-show-hits", default=None, help="Print the total hit count first.")
@click.option("--sort-fields/--no-sort-fields", default=None, help="Sort fields by name.")
@click.option("--suppress-names/--no-suppress-names", default=None, help="Omit field names.")
@click.option("--tabular", is_flag=True, default=False, help="Shortcut for --format tabular.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice([fmt.value for fmt in OutputFormat], case_sensitive=False),
    default=None,
    help="Output format.",
)
@click.option("-o", "--output", default=None, help="Output file; '-' for stdout.")
@click.option("--log-level", type=click.Choice(_LOG_LEVELS, case_sensitive=False), default=None)
@click.argument("query", nargs=-1, required=True)
@click.pass_context
def query_cmd(ctx: click.Context, query: tuple[str, ...], **options: Any) -> None:
    """Run QUERY against the index and print matching documents.

    QUERY is a query string (e.g. 'title:python') or one of the directives
    %all, %ids ID..., %id-file FILE, %enumerate-fields, %count-fields,
    %enumerate-terms FIELD, %script FILE.

    Args:
        ctx: Click context.
        query: Query tokens.

    Raises:
        click.Abort: When the query fails.
    """
    raw = merge_config_dicts(ctx.obj or {}, build_overrides(**options))
    try:
        cfg = parse_config_dict(raw)
    except (TypeError, ValueError) as exc:
        raise click.UsageError(str(exc)) from exc
    runner = CommandRunner(cfg)
    runner.run_query(query, action=ctx.command.name)


def build_overrides(
    *,
    index_paths: tuple[str, ...] = (),
    fields: tuple[str, ...] = (),
    query_limit: int | None = None,
    output_limit: int | None = None,
    analyzer: str | None = None,
    query_field: str | None = None,
    regex: str | None = None,
    show_id: bool | None = None,
    show_score: bool | None = None,
    show_hits: bool | None = None,
    sort_fields: bool | None = None,
    suppress_names: bool | None = None,
    tabular: bool = False,
    output_format: str | None = None,
    output: str | None = None,
    log_level: str | None = None,
) -> dict[str, Any]:
    """Map CLI options to a config override mapping; unset options are left out."""
    overrides: dict[str, dict[str, Any]] = {"log": {}, "index": {}, "query": {}, "output": {}}
    if index_paths:
        overrides["index"]["paths"] = list(index_paths)
    if fields:
        overrides["query"]["fields"] = [
            name.strip() for item in fields for name in item.split(",") if name.strip()
        ]

    query_values = {
        "query_limit": query_limit,
        "output_limit": output_limit,
        "analyzer": analyzer,
        "query_field": query_field,
        "regex": regex,
        "show_id": show_id,
        "show_score": show_score,
        "show_hits": show_hits,
        "sort_fields": sort_fields,
        "suppress_names": suppress_names,
    }
    overrides["query"].update({key: value for key, value in query_values.items() if value is not None})

    if output_format is not None:
        overrides["output"]["format"] = output_format.lower()
    if tabular:
        overrides["output"]["format"] = OutputFormat.TABULAR.value
    if output is not None:
        overrides["output"]["path"] = output
    if log_level is not None:
        overrides["log"]["level"] = log_level.upper()
    return {section: values for section, values in overrides.items() if values}
