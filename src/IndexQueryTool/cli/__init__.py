"""CLI package for IndexQueryTool command orchestration.

This package contains the click command group, the command runner and the
factories that build the query components from the configuration.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from IndexQueryTool.cli.runner import CommandRunner
from IndexQueryTool.cli.ui import cli


def main() -> None:
    """Run IndexQueryTool CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
