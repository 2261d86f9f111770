"""Markdown incident summary built from a Timeline."""

from pathlib import Path

from pivot.core.config import PivotConfig
from pivot.models.event import format_timestamp
from pivot.models.timeline import CRITICAL_TAG, Timeline
from pivot.rules.engine import RuleSet
from pivot.timeline.assembler import build_timeline


def summarize_timeline(timeline: Timeline) -> str:
    """Render a Timeline as a markdown incident report."""
    if timeline.is_empty:
        return f"# Incident Summary: {timeline.title}\n\nNo events found."

    critical = [e for e in timeline.events if CRITICAL_TAG in e.tags]
    unique_ips = {e.metadata.ip for e in timeline.events if e.metadata.ip}
    clusters = {e.cluster for e in timeline.events if e.cluster}

    lines = [
        f"# Incident Summary: {timeline.title}",
        "",
        f"**Duration:** {timeline.start_time} to {timeline.end_time}",
        f"**Total Events:** {len(timeline.events)}",
        f"**Critical Events:** {len(critical)}",
        f"**Unique IPs Involved:** {len(unique_ips)}",
        f"**Correlated Clusters:** {len(clusters)}",
        "",
        "## Rule Findings",
    ]
    if timeline.findings:
        lines.extend(f"- {finding}" for finding in timeline.findings)
    else:
        lines.append("- None")

    lines += ["", "## Key Events"]
    if critical:
        lines.extend(
            f"- [{format_timestamp(e.timestamp)}] {e.message} (Source: {e.source})"
            for e in critical
        )
    else:
        lines.append("- No critical events detected.")

    lines += ["", "## Recommendations"]
    if critical or timeline.findings:
        lines.append("- Investigate source IPs for potential brute force or unauthorized access.")
    else:
        lines.append("- No critical events detected.")

    return "\n".join(lines)


def summarize_incident(
    path: Path | str,
    config: PivotConfig | None = None,
    rules: RuleSet | None = None,
) -> str:
    """Build a timeline for a log file and render its summary."""
    return summarize_timeline(build_timeline(path, config, rules))
