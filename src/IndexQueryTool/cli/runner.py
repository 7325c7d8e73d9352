"""Command runner for coordinating CLI execution.

Manages component lifecycle, resource cleanup, logging configuration,
and error handling for command execution.
"""

from __future__ import annotations

from typing import Sequence

import click

from IndexQueryTool.cli.factories import create_index, create_run_configuration
from IndexQueryTool.config import AppConfig
from IndexQueryTool.services import create_dispatcher
from IndexQueryTool.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Handles logging configuration, component creation, index and output
    file lifetime, and error handling for CLI commands.
    """

    def __init__(self, config: AppConfig) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
        """
        self.config = config

    def run_query(self, tokens: Sequence[str], action: str) -> None:
        """Execute one query directive with full resource management.

        Args:
            tokens: Query argument tokens.
            action: The CLI command name (e.g., 'query').

        Raises:
            click.Abort: When the query fails.
        """
        log_path = configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        if log_path is not None:
            log.info("Logging to %s", log_path)
        try:
            with create_index(self.config) as index:
                run_config = create_run_configuration(index, self.config)
                with click.open_file(self.config.output.path or "-", "w", encoding="utf-8") as out:
                    create_dispatcher(index, run_config, out).run(list(tokens))
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Query failed: %s", e)
            raise click.Abort from e
