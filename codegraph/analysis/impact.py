"""
Change impact analysis.

Edges are treated as undirected: a change to a node may affect what it uses
and what uses it. Direct impact is every neighbour of the changed node;
indirect impact is everything else reachable from the direct set.
"""
from collections import deque
from typing import Dict, List

from ..types import ImpactLevel, ImpactResult, KnowledgeGraph, Node
from ..utils.logger import app_logger


def build_undirected_adjacency(graph: KnowledgeGraph) -> Dict[str, List[str]]:
    """Neighbours of every node in either direction, in edge order, without repeats."""
    adjacency: Dict[str, List[str]] = {}
    seen: Dict[str, set] = {}
    for edge in graph.edges:
        for a, b in ((edge.source, edge.target), (edge.target, edge.source)):
            if b not in seen.setdefault(a, set()):
                seen[a].add(b)
                adjacency.setdefault(a, []).append(b)
    return adjacency


class ChangeImpactAnalyzer:
    """Finds the nodes affected by a change to one node."""

    def __init__(self):
        self.logger = app_logger.bind(component="impact_analyzer")

    def analyze_impact(self, graph: KnowledgeGraph, node_id: str) -> List[ImpactResult]:
        """
        Analyze the impact of changes to a specific node in the knowledge graph.

        Args:
            graph: The knowledge graph
            node_id: The ID of the node that has changed

        Returns:
            One entry per impacted node, direct impacts first. Empty if the
            node is not in the graph.
        """
        nodes_by_id: Dict[str, Node] = {node.id: node for node in graph.nodes}
        if node_id not in nodes_by_id:
            self.logger.debug(f"Node {node_id} not found in graph")
            return []

        adjacency = build_undirected_adjacency(graph)

        direct = [
            neighbor for neighbor in adjacency.get(node_id, [])
            if neighbor != node_id and neighbor in nodes_by_id
        ]

        # BFS from the direct set
        visited = {node_id, *direct}
        queue = deque(direct)
        indirect: List[str] = []
        while queue:
            current = queue.popleft()
            for neighbor in adjacency.get(current, []):
                if neighbor in visited or neighbor not in nodes_by_id:
                    continue
                visited.add(neighbor)
                indirect.append(neighbor)
                queue.append(neighbor)

        results = [
            ImpactResult(impacted_nodes=[nodes_by_id[impacted]], impact_level=ImpactLevel.DIRECT)
            for impacted in direct
        ]
        results.extend(
            ImpactResult(impacted_nodes=[nodes_by_id[impacted]], impact_level=ImpactLevel.INDIRECT)
            for impacted in indirect
        )

        self.logger.debug(f"Impact of {node_id}: {len(direct)} direct, {len(indirect)} indirect")
        return results


def analyze_impact(graph: KnowledgeGraph, node_id: str) -> List[ImpactResult]:
    """Analyze the impact of changing ``node_id``; see :class:`ChangeImpactAnalyzer`."""
    return ChangeImpactAnalyzer().analyze_impact(graph, node_id)


def group_impact(results: List[ImpactResult]) -> Dict[str, List[Node]]:
    """Group flat impact results into ``{"direct": [...], "indirect": [...]}``."""
    grouped: Dict[str, List[Node]] = {level.value: [] for level in ImpactLevel}
    for result in results:
        grouped[result.impact_level.value].extend(result.impacted_nodes)
    return grouped
