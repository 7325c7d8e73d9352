"""Index domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from IndexQueryTool.config.common import get_optional_value, get_section


@dataclass(frozen=True, slots=True)
class IndexConfig:
    """Location of the indexes to query.

    Attributes:
        paths: Index directories, searched together as one index. Empty until
            given by the config file, ``--index`` options or the ``IQT_INDEX``
            environment variable.
    """

    paths: tuple[str, ...]


def load_index(raw: Mapping[str, Any]) -> IndexConfig:
    """Load the ``index`` section.

    ``paths`` is a list of directories; a single string names one directory.
    """
    section = get_section(raw, "index", required=False)
    value = get_optional_value(section, "paths", [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise TypeError("index.paths must be a list")
    for idx, item in enumerate(value):
        if not isinstance(item, str):
            raise TypeError(f"index.paths[{idx}] must be a string")
    return IndexConfig(paths=tuple(value))


def check_index(config: IndexConfig) -> None:
    """Validate index domain constraints.

    Raises:
        ValueError: If a path is blank.
    """
    if any(not path.strip() for path in config.paths):
        raise ValueError("index.paths must not contain empty paths")
