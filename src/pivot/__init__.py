"""Pivot: incident timeline builder.

Normalizes raw log files into structured events, correlates them through
shared entities, and runs detection rules over the batch.
"""

__version__ = "0.1.0"

from pivot.normalizer import load_events
from pivot.timeline import build_timeline, summarize_incident

__all__ = [
    "__version__",
    "build_timeline",
    "load_events",
    "summarize_incident",
]
