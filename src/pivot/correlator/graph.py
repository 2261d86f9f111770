"""Entity graph correlator.

Links events that share identifying attributes and groups them into
clusters via graph connectivity. The graph is undirected and has two
kinds of nodes:

- event nodes: ``Event:<id>``
- entity nodes: ``<key>:<value>`` for each watched metadata key

Two events land in the same cluster when a path of shared entities
connects them, so correlation is transitive: A and B share an ip, B and
C share a userId, therefore A and C are related even with nothing in
common directly.
"""

from collections.abc import Sequence

import networkx as nx

from pivot.core.logging import get_logger
from pivot.models.event import Event, Level
from pivot.models.timeline import CLUSTER_TAG_PREFIX, CRITICAL_TAG, TimelineEvent

logger = get_logger("correlator")

EVENT_NODE_PREFIX = "Event:"


def event_node(event_id: str) -> str:
    return f"{EVENT_NODE_PREFIX}{event_id}"


def entity_node(key: str, value: str) -> str:
    return f"{key}:{value}"


class GraphCorrelator:
    """Clusters events into connected components of the entity graph."""

    def build_graph(self, events: Sequence[Event]) -> nx.Graph:
        """Build the event/entity graph.

        Only watched correlation keys produce edges; other metadata is
        ignored.
        """
        graph = nx.Graph()
        for event in events:
            node = event_node(event.id)
            graph.add_node(node, kind="event")
            for key, value in event.metadata.watched():
                entity = entity_node(key.value, value)
                graph.add_node(entity, kind="entity")
                graph.add_edge(node, entity)
        return graph

    def clusters(self, events: Sequence[Event], graph: nx.Graph | None = None) -> list[list[str]]:
        """Compute clusters of event ids.

        Breadth-first traversal starts from every unvisited event node,
        in input order, passing through entity nodes without reporting
        them.

        Returns:
            One list of event ids per cluster, in discovery order
        """
        if graph is None:
            graph = self.build_graph(events)

        visited: set[str] = set()
        clusters: list[list[str]] = []

        for event in events:
            start = event_node(event.id)
            if start in visited:
                continue

            reached = [start] + [v for _, v in nx.bfs_edges(graph, start)]
            visited.update(reached)
            clusters.append([
                node[len(EVENT_NODE_PREFIX):]
                for node in reached
                if graph.nodes[node].get("kind") == "event"
            ])

        return clusters

    def correlate(self, events: Sequence[Event]) -> list[TimelineEvent]:
        """Correlate events into timeline events.

        Args:
            events: Full event set of one ingestion batch

        Returns:
            One TimelineEvent per input event, ascending by timestamp
        """
        if not events:
            return []

        graph = self.build_graph(events)
        clusters = self.clusters(events, graph)

        cluster_of: dict[str, int] = {}
        for index, members in enumerate(clusters):
            for event_id in members:
                cluster_of[event_id] = index

        timeline_events = []
        for event in events:
            index = cluster_of[event.id]
            related = [event_id for event_id in clusters[index] if event_id != event.id]
            tags = [f"{CLUSTER_TAG_PREFIX}{index}"]
            if event.level == Level.ERROR:
                tags.append(CRITICAL_TAG)
            timeline_events.append(TimelineEvent.from_event(event, related, tags))

        logger.debug(
            "Correlated events",
            events=len(events),
            entities=graph.number_of_nodes() - len(cluster_of),
            clusters=len(clusters),
        )

        return sorted(timeline_events, key=lambda e: e.timestamp)
