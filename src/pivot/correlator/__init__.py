"""Entity graph correlation of normalized events."""

from pivot.correlator.graph import GraphCorrelator, entity_node, event_node

__all__ = ["GraphCorrelator", "entity_node", "event_node"]
