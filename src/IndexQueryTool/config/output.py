"""Output domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from IndexQueryTool.config.common import (
    expect_optional_str,
    expect_str,
    get_optional_value,
    get_section,
)
from IndexQueryTool.renderers.base import OutputFormat

_ALLOWED_FORMATS = {fmt.value for fmt in OutputFormat}


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """Output configuration.

    Attributes:
        format: Output format name.
        path: Output file; None or ``-`` for stdout.
    """

    format: str
    path: str | None

    @property
    def tabular(self) -> bool:
        return self.format == OutputFormat.TABULAR.value


def load_output(raw: Mapping[str, Any]) -> OutputConfig:
    """Load the ``output`` section.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "output", required=False)
    return OutputConfig(
        format=expect_str(get_optional_value(section, "format", OutputFormat.MULTILINE.value), "output.format").lower(),
        path=expect_optional_str(section.get("path"), "output.path"),
    )


def check_output(config: OutputConfig) -> None:
    """Validate output domain constraints.

    Raises:
        ValueError: If the format is unknown or the path is blank.
    """
    if config.format not in _ALLOWED_FORMATS:
        raise ValueError(f"output.format must be one of {sorted(_ALLOWED_FORMATS)}")
    if config.path is not None and not config.path.strip():
        raise ValueError("output.path must not be empty")
