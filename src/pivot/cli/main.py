"""Pivot CLI entry point and global options."""

from pathlib import Path
from typing import Literal

import click

from pivot import __version__
from pivot.cli.commands import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    load,
    rules,
    summarize,
    timeline,
)
from pivot.cli.output import OutputFormat, OutputFormatter, set_output_format
from pivot.core.config import load_config
from pivot.core.errors import ConfigError, handle_error
from pivot.core.logging import configure_logging
from pivot.timeline.assembler import TimelineAssembler


@click.group()
@click.option(
    "--format",
    "-f",
    type=click.Choice(["json", "jsonl", "human"]),
    default="json",
    help="Output format (default: json)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose logging to stderr",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress info output on stderr",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Log format for stderr (default: text)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML config file (default: $PIVOT_CONFIG or built-in defaults)",
)
@click.version_option(version=__version__, prog_name="pivot")
@click.pass_context
def cli(
    ctx: click.Context,
    format: OutputFormat,
    verbose: bool,
    quiet: bool,
    log_format: Literal["text", "json"],
    config_path: Path | None,
) -> None:
    """Pivot: correlate log events into an incident timeline.

    Normalizes JSON or free-text logs, links events that share an ip,
    user, device or session, and runs detection rules over the batch.
    """
    configure_logging(log_format=log_format, quiet=quiet, verbose=verbose)
    set_output_format(format)
    formatter = OutputFormatter(format=format)

    try:
        config = load_config(config_path)
        # Rule set is built once here and shared read-only by every command
        assembler = TimelineAssembler(config)
    except ConfigError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(EXIT_CONFIG_ERROR)

    ctx.ensure_object(dict)
    ctx.obj = {
        "format": format,
        "verbose": verbose,
        "quiet": quiet,
        "log_format": log_format,
        "config": config,
        "assembler": assembler,
        "formatter": formatter,
    }


cli.add_command(load)
cli.add_command(timeline)
cli.add_command(summarize)
cli.add_command(rules)


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        handle_error(e, exit_code=EXIT_ERROR)


if __name__ == "__main__":
    main()
