"""
Incremental graph updates.

Only the fragments owned by changed files are replaced. Every node and edge
belonging to an unchanged file is carried over as the very same object, in
its original relative order, so consumers can track node identity across
updates.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..config import settings
from ..extractors.registry import ExtractorRegistry, default_registry
from ..types import Edge, FileInput, KnowledgeGraph, Node, SourceFile, as_source_file
from ..utils.logger import app_logger
from ..utils.paths import is_same_or_child
from .graph_builder import (
    dedupe_edges,
    dedupe_nodes,
    ensure_module_node,
    extract_file,
    prune_dangling_edges,
)


@dataclass
class GraphUpdateState:
    """Working copy of a graph, owned by a single update call."""
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    @classmethod
    def from_graph(cls, graph: KnowledgeGraph) -> "GraphUpdateState":
        return cls(nodes=list(graph.nodes), edges=list(graph.edges))

    def remove_files(self, file_paths: List[str]) -> int:
        """Drop nodes owned by ``file_paths`` (or files beneath them) and their edges."""
        before = len(self.nodes)
        self.nodes = [
            node for node in self.nodes
            if not any(is_same_or_child(node.file_path, path) for path in file_paths)
        ]
        self.prune()
        return before - len(self.nodes)

    def prune(self) -> int:
        before = len(self.edges)
        self.edges = prune_dangling_edges(self.nodes, self.edges)
        return before - len(self.edges)

    def to_graph(self) -> KnowledgeGraph:
        nodes = dedupe_nodes(self.nodes)
        edges = prune_dangling_edges(nodes, dedupe_edges(self.edges))
        return KnowledgeGraph(nodes=nodes, edges=edges)


class IncrementalGraphUpdater:
    """Replaces the graph fragments of changed files."""

    def __init__(self, registry: Optional[ExtractorRegistry] = None, max_files: Optional[int] = None):
        self.registry = registry if registry is not None else default_registry()
        self.max_files = max_files if max_files is not None else settings.max_files
        self.logger = app_logger.bind(component="incremental_updater")

    def update_graph(self, current_graph: KnowledgeGraph, changed_files: Iterable[FileInput],
                     registry: Optional[ExtractorRegistry] = None) -> KnowledgeGraph:
        """
        Update the knowledge graph incrementally with changed files.

        Args:
            current_graph: Graph to start from; it is not modified
            changed_files: Files that were modified; ``content=None`` marks a deletion
            registry: Extractors to use, defaults to the updater's own

        Returns:
            A new graph with the changed files' fragments replaced
        """
        registry = registry if registry is not None else self.registry
        files = [as_source_file(file) for file in changed_files]
        if len(files) > self.max_files:
            # Files past the cap are neither removed nor re-extracted
            self.logger.warning(
                f"Received {len(files)} changed files, only the first {self.max_files} will be processed"
            )
            files = files[:self.max_files]
        state = GraphUpdateState.from_graph(current_graph)
        if not files:
            return state.to_graph()

        removed = state.remove_files([file.path for file in files])
        self.logger.debug(f"Removed {removed} stale nodes for {len(files)} changed files")

        added = 0
        for file in files:
            if file.content is None:
                continue
            result = extract_file(registry, file, self.logger)
            if result is None:
                continue
            state.nodes.extend(result.nodes)
            state.edges.extend(result.edges)
            ensure_module_node(state.nodes, file.path, {node.id for node in state.nodes})
            added += len(result.nodes)

        state.prune()
        graph = state.to_graph()
        self.logger.info(
            f"Updated graph for {len(files)} files: -{removed} +{added} nodes, "
            f"{len(graph.nodes)} nodes, {len(graph.edges)} edges total"
        )
        return graph

    def remove_files(self, current_graph: KnowledgeGraph, file_paths: Iterable[str]) -> KnowledgeGraph:
        """Drop every fragment owned by ``file_paths``."""
        return self.update_graph(current_graph, [SourceFile(path=path) for path in file_paths])


def update_graph(current_graph: KnowledgeGraph, changed_files: Iterable[FileInput],
                 registry: Optional[ExtractorRegistry] = None,
                 max_files: Optional[int] = None) -> KnowledgeGraph:
    """Functional form of :meth:`IncrementalGraphUpdater.update_graph`."""
    return IncrementalGraphUpdater(registry, max_files).update_graph(current_graph, changed_files)
