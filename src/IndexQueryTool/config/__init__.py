from __future__ import annotations

"""Public configuration API for IndexQueryTool."""

from IndexQueryTool.config.app import (
    DEFAULT_CONFIG,
    AppConfig,
    check_cross_domain,
    load_config,
    load_raw_config,
    merge_config_dicts,
    parse_config_dict,
)
from IndexQueryTool.config.index import IndexConfig
from IndexQueryTool.config.output import OutputConfig
from IndexQueryTool.config.query import QueryConfig
from IndexQueryTool.config.runtime import RuntimeConfig

__all__ = [
    "DEFAULT_CONFIG",
    "RuntimeConfig",
    "IndexConfig",
    "QueryConfig",
    "OutputConfig",
    "AppConfig",
    "load_config",
    "load_raw_config",
    "merge_config_dicts",
    "parse_config_dict",
    "check_cross_domain",
]
