"""Factory functions for CLI component creation.

Turns the parsed application config into the objects one invocation needs:
the opened index and a run configuration validated against its catalog.
"""

from __future__ import annotations

from IndexQueryTool.config import AppConfig
from IndexQueryTool.core.catalog import FieldCatalog
from IndexQueryTool.core.errors import ConfigurationError
from IndexQueryTool.core.settings import RunConfiguration
from IndexQueryTool.index import WhooshIndex, open_index
from IndexQueryTool.index.base import SearchIndex
from IndexQueryTool.core.regex_filter import parse_regex_option
from IndexQueryTool.utils.log import log


def create_index(config: AppConfig) -> WhooshIndex:
    """Open the configured indexes, searched together as one.

    Raises:
        ConfigurationError: If no index path is configured.
        DataAccessError: If a path holds no index.
    """
    if not config.index.paths:
        raise ConfigurationError("No index given: pass --index, set IQT_INDEX or index.paths in the config file")
    return open_index(config.index.paths)


def create_run_configuration(index: SearchIndex, config: AppConfig) -> RunConfiguration:
    """Build a run configuration from the application config.

    Every field name is validated against the index catalog here, before any
    query runs.

    Args:
        index: Opened index.
        config: Application configuration.

    Returns:
        Run configuration ready for the dispatcher.
    """
    query = config.query
    run_config = RunConfiguration(FieldCatalog.from_index(index))
    run_config.set_field_names(query.fields)
    if query.regex is not None:
        field, pattern = parse_regex_option(query.regex)
        run_config.set_regex(field, pattern)
    run_config.set_default_field(query.query_field)
    run_config.set_analyzer(query.analyzer)
    run_config.set_query_limit(query.query_limit)
    run_config.set_output_limit(query.output_limit)
    run_config.set_output_format(config.output.format)
    run_config.set_show_id(query.show_id)
    run_config.set_show_score(query.show_score)
    run_config.set_show_hits(query.show_hits)
    run_config.set_sort_fields(query.sort_fields)
    run_config.set_suppress_names(query.suppress_names)
    log.debug(
        "Run configuration: fields=%s format=%s analyzer=%s",
        list(run_config.field_names),
        run_config.output_format.value,
        run_config.analyzer.value,
    )
    return run_config
