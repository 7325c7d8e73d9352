from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from IndexQueryTool.config.index import IndexConfig, check_index, load_index
from IndexQueryTool.config.output import OutputConfig, check_output, load_output
from IndexQueryTool.config.query import QueryConfig, check_query, load_query
from IndexQueryTool.config.runtime import RuntimeConfig, check_runtime, load_runtime

DEFAULT_CONFIG: dict[str, Any] = {
    "log": {"level": "WARNING", "to_file": False, "dir": "log"},
    "index": {"paths": []},
    "query": {
        "fields": [],
        "query_limit": None,
        "output_limit": None,
        "analyzer": "KeywordAnalyzer",
        "query_field": None,
        "regex": None,
        "show_id": False,
        "show_score": False,
        "show_hits": False,
        "sort_fields": False,
        "suppress_names": False,
    },
    "output": {"format": "multiline", "path": None},
}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    index: IndexConfig
    query: QueryConfig
    output: OutputConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse normalized mapping into AppConfig."""
    runtime = load_runtime(raw)
    index = load_index(raw)
    query = load_query(raw)
    output = load_output(raw)

    check_runtime(runtime)
    check_index(index)
    check_query(query)
    check_output(output)

    config = AppConfig(runtime=runtime, index=index, query=query, output=output)
    check_cross_domain(config)
    return config


def load_config(path: Path | None = None) -> AppConfig:
    """Load config by merging the built-in defaults with an optional YAML file."""
    return parse_config_dict(load_raw_config(path))


def load_raw_config(path: Path | None = None) -> dict[str, Any]:
    """Return the built-in defaults merged with the YAML file at ``path``.

    Raises:
        ValueError: If the file cannot be read or is not a YAML mapping.
    """
    base = deepcopy(DEFAULT_CONFIG)
    if path is None:
        return base
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read config file {path}: {exc}") from exc
    return merge_config_dicts(base, parse_yaml(text))


def check_cross_domain(config: AppConfig) -> None:
    """Validate cross-domain constraints."""
    if config.output.tabular and not config.query.fields:
        raise ValueError("output.format=tabular requires query.fields")


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
