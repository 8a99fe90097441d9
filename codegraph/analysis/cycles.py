"""
Cycle detection over the knowledge graph.

Depth-first search from every unvisited node, tracking the nodes on the
active path. Every edge back into the active path yields one cycle, rebuilt
from the DFS parent pointers. This reports some cycles of a strongly
connected component, not all of them: it answers "are there cycles, and show
some examples".

The DFS keeps an explicit stack so deep graphs do not hit the interpreter's
recursion limit.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union

from ..types import CycleDetectionResult, KnowledgeGraph
from ..utils.logger import app_logger


@dataclass(frozen=True)
class NoCycle:
    """The edge closes no cycle."""


@dataclass(frozen=True)
class Cycle:
    """The edge closes a cycle; ``path`` starts and ends at the same node."""
    path: Tuple[str, ...]


EdgeOutcome = Union[NoCycle, Cycle]


def build_adjacency(graph: KnowledgeGraph) -> Dict[str, List[str]]:
    """Directed adjacency list with an entry for every node, neighbours in edge order."""
    adjacency: Dict[str, List[str]] = {node.id: [] for node in graph.nodes}
    for edge in graph.edges:
        targets = adjacency.setdefault(edge.source, [])
        if edge.target not in targets:
            targets.append(edge.target)
    return adjacency


class CycleDetector:
    """Finds cycles in a knowledge graph with DFS."""

    def __init__(self):
        self.logger = app_logger.bind(component="cycle_detector")

    def detect_cycles(self, graph: KnowledgeGraph) -> CycleDetectionResult:
        """
        Detect cycles in the knowledge graph.

        Returns:
            CycleDetectionResult whose cycles are closed paths of node ids
        """
        adjacency = build_adjacency(graph)
        visited: Set[str] = set()
        recursion_stack: Set[str] = set()
        parent: Dict[str, Optional[str]] = {}
        cycles: List[List[str]] = []

        for node in graph.nodes:
            if node.id not in visited:
                parent[node.id] = None
                self._dfs(node.id, adjacency, visited, recursion_stack, parent, cycles)

        self.logger.debug(f"Found {len(cycles)} cycles in {len(graph.nodes)} nodes")
        return CycleDetectionResult(cycles=cycles, has_cycles=bool(cycles))

    def _dfs(self, root: str, adjacency: Dict[str, List[str]], visited: Set[str],
             recursion_stack: Set[str], parent: Dict[str, Optional[str]], cycles: List[List[str]]):
        visited.add(root)
        recursion_stack.add(root)
        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(adjacency.get(root, ())))]

        while stack:
            current, neighbors = stack[-1]
            descended = False

            for neighbor in neighbors:
                if neighbor not in visited:
                    parent[neighbor] = current
                    visited.add(neighbor)
                    recursion_stack.add(neighbor)
                    stack.append((neighbor, iter(adjacency.get(neighbor, ()))))
                    descended = True
                    break

                outcome = self._check_edge(current, neighbor, recursion_stack, parent)
                if isinstance(outcome, Cycle):
                    cycles.append(list(outcome.path))

            if not descended:
                stack.pop()
                recursion_stack.discard(current)

    @staticmethod
    def _check_edge(current: str, neighbor: str, recursion_stack: Set[str],
                    parent: Dict[str, Optional[str]]) -> EdgeOutcome:
        """Classify an edge into an already visited node."""
        if neighbor not in recursion_stack:
            return NoCycle()

        path = [current]
        node: Optional[str] = current
        while node != neighbor:
            node = parent.get(node)
            if node is None:
                return NoCycle()
            path.append(node)

        path.reverse()
        path.append(neighbor)
        return Cycle(path=tuple(path))


def detect_cycles(graph: KnowledgeGraph) -> CycleDetectionResult:
    """Detect cycles in ``graph``; see :class:`CycleDetector`."""
    return CycleDetector().detect_cycles(graph)
