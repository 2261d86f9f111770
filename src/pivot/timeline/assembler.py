"""Timeline assembler.

Drives the pipeline for one file: normalize, correlate, evaluate rules,
and merge the results into a Timeline.
"""

from pathlib import Path
from uuid import uuid4

from pivot.core.config import PivotConfig
from pivot.core.logging import get_logger
from pivot.correlator.graph import GraphCorrelator
from pivot.models.event import Event, format_timestamp
from pivot.models.timeline import Timeline
from pivot.normalizer.stream import EventNormalizer
from pivot.rules.builtin import default_ruleset
from pivot.rules.engine import RuleEngine, RuleSet

logger = get_logger("timeline")

EMPTY_TITLE = "Empty Timeline"
FINDINGS_MARKER = "Findings: "


def empty_timeline() -> Timeline:
    """Sentinel returned when a file yields no events."""
    return Timeline(id=str(uuid4()), title=EMPTY_TITLE)


def render_summary(event_count: int, findings: list[str]) -> str:
    """Templated summary; the findings marker appears only when a rule fired."""
    summary = f"Analyzed {event_count} events."
    if findings:
        summary += f" {FINDINGS_MARKER}{'; '.join(findings)}"
    return summary


class TimelineAssembler:
    """Builds Timelines from log files.

    The rule set is fixed at construction and shared read-only by every
    build, so one assembler can serve concurrent requests.
    """

    def __init__(
        self,
        config: PivotConfig | None = None,
        rules: RuleSet | None = None,
    ) -> None:
        self.config = config or PivotConfig()
        self.rules = rules if rules is not None else default_ruleset(self.config.rules)
        self.normalizer = EventNormalizer(self.config.ingest)
        self.correlator = GraphCorrelator()
        self.engine = RuleEngine(self.rules)

    def build(self, path: Path | str) -> Timeline:
        """Build a Timeline for one log file.

        Raises:
            PivotError: Input and parse errors propagate unchanged
        """
        logger.info("Building timeline", path=str(path))
        events = list(self.normalizer.stream(path))
        timeline = self.assemble(events, title=f"Incident Timeline - {path}")
        logger.info(
            "Timeline built",
            path=str(path),
            events=len(timeline.events),
            findings=len(timeline.findings),
        )
        return timeline

    def assemble(self, events: list[Event], title: str) -> Timeline:
        """Merge correlation and rule results for an already drained event list."""
        if not events:
            return empty_timeline()

        correlated = self.correlator.correlate(events)
        findings = [finding.text for finding in self.engine.evaluate(events)]

        return Timeline(
            id=str(uuid4()),
            title=title,
            start_time=format_timestamp(correlated[0].timestamp),
            end_time=format_timestamp(correlated[-1].timestamp),
            events=correlated,
            summary=render_summary(len(events), findings),
            findings=findings,
        )


def build_timeline(
    path: Path | str,
    config: PivotConfig | None = None,
    rules: RuleSet | None = None,
) -> Timeline:
    """Build a correlated Timeline for a log file.

    Args:
        path: Path to the log file
        config: Pivot configuration (defaults apply when omitted)
        rules: Rule set to evaluate (built-in rules when omitted)

    Returns:
        Populated Timeline, or the empty-timeline sentinel
    """
    return TimelineAssembler(config, rules).build(path)
