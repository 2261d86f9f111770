"""Timeline CLI commands for Pivot."""

import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

import click

from pivot.cli.output import OutputFormatter
from pivot.core.errors import PivotError
from pivot.core.logging import get_logger
from pivot.models.error import ErrorCode
from pivot.models.metrics import StepMetrics
from pivot.normalizer.stream import EventNormalizer
from pivot.timeline.assembler import TimelineAssembler
from pivot.timeline.summary import summarize_timeline

logger = get_logger("cli")

T = TypeVar("T")

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INPUT_ERROR = 3
EXIT_PARSE_ERROR = 4
EXIT_TIMEOUT = 10
EXIT_RESOURCE_EXHAUSTED = 11

EXIT_CODES = {
    ErrorCode.CONFIG_ERROR: EXIT_CONFIG_ERROR,
    ErrorCode.INPUT_NOT_FOUND: EXIT_INPUT_ERROR,
    ErrorCode.INPUT_UNREADABLE: EXIT_INPUT_ERROR,
    ErrorCode.MALFORMED_JSON: EXIT_PARSE_ERROR,
    ErrorCode.TIMEOUT: EXIT_TIMEOUT,
    ErrorCode.RESOURCE_EXHAUSTED: EXIT_RESOURCE_EXHAUSTED,
}

log_path_argument = click.argument(
    "log_path",
    type=click.Path(path_type=Path, dir_okay=False),
)


def _run_step(
    ctx: click.Context,
    step_name: str,
    log_path: Path,
    action: Callable[[], T],
    count: Callable[[T], int],
    findings: Callable[[T], int] = lambda _: 0,
) -> T:
    """Run one command step, emitting metrics or a structured error."""
    formatter: OutputFormatter = ctx.obj["formatter"]
    start_time = time.time()

    try:
        result = action()
    except PivotError as e:
        logger.error(str(e), code=e.code)
        formatter.error(e.to_structured_error())
        ctx.exit(EXIT_CODES.get(e.code, EXIT_ERROR))

    records = count(result)
    metrics = StepMetrics(
        run_id=uuid4(),
        step_name=step_name,
        duration_ms=int((time.time() - start_time) * 1000),
        records_processed=records,
        records_output=records,
        bytes_read=log_path.stat().st_size,
        findings=findings(result),
    )
    logger.info(
        f"{step_name}: {records} events in {metrics.duration_ms}ms",
        **metrics.model_dump(mode="json", exclude={"step_name"}),
    )
    return result


@click.command()
@log_path_argument
@click.pass_context
def load(ctx: click.Context, log_path: Path) -> None:
    """Normalize a log file and print its events.

    \b
    Examples:
      pivot load /var/log/auth.log
      pivot --format jsonl load events.json
    """
    formatter: OutputFormatter = ctx.obj["formatter"]
    normalizer = EventNormalizer(ctx.obj["config"].ingest)

    events = _run_step(
        ctx,
        "load_events",
        log_path,
        lambda: list(normalizer.stream(log_path)),
        count=len,
    )
    formatter.events(events, title=f"Events - {log_path}")


@click.command()
@log_path_argument
@click.pass_context
def timeline(ctx: click.Context, log_path: Path) -> None:
    """Build a correlated timeline for a log file.

    Output is the timeline as JSON. With ``--format jsonl`` the first
    line holds the timeline fields and each following line one event.
    A ``Findings: `` marker in the summary (and a non-empty ``findings``
    list) means a rule fired.
    """
    formatter: OutputFormatter = ctx.obj["formatter"]
    assembler: TimelineAssembler = ctx.obj["assembler"]

    result = _run_step(
        ctx,
        "build_timeline",
        log_path,
        lambda: assembler.build(log_path),
        count=lambda t: len(t.events),
        findings=lambda t: len(t.findings),
    )

    if formatter.is_human():
        click.echo(f"{result.title}\n{result.summary or ''}")
        formatter.events(result.events)
    elif formatter.format == "jsonl":
        # First line carries the timeline without its events
        header = result.to_dict()
        header.pop("events", None)
        formatter.events([header, *result.events])
    else:
        formatter.output(result.to_dict())


@click.command()
@log_path_argument
@click.pass_context
def summarize(ctx: click.Context, log_path: Path) -> None:
    """Print a markdown incident summary for a log file."""
    assembler: TimelineAssembler = ctx.obj["assembler"]

    result = _run_step(
        ctx,
        "summarize_incident",
        log_path,
        lambda: assembler.build(log_path),
        count=lambda t: len(t.events),
        findings=lambda t: len(t.findings),
    )
    click.echo(summarize_timeline(result))


@click.command()
@click.pass_context
def rules(ctx: click.Context) -> None:
    """List the active detection rules."""
    formatter: OutputFormatter = ctx.obj["formatter"]
    assembler: TimelineAssembler = ctx.obj["assembler"]

    listing: list[dict[str, Any]] = [
        {"id": r.id, "name": r.name, "description": r.description}
        for r in assembler.rules
    ]
    if formatter.is_human():
        for item in listing:
            click.echo(f"{item['id']}  {item['name']}: {item['description']}")
    else:
        formatter.output(listing)
