"""
Builds a knowledge graph from already-read source files.
"""
from typing import Dict, Iterable, List, Optional, Set

from ..analysis.cycles import detect_cycles
from ..analysis.impact import analyze_impact
from ..config import settings
from ..extractors.base import BaseExtractor
from ..extractors.registry import ExtractorRegistry, default_registry
from ..types import (
    CycleDetectionResult,
    Edge,
    ExtractionResult,
    FileInput,
    ImpactResult,
    KnowledgeGraph,
    Node,
    NodeType,
    SourceFile,
    as_source_file,
    module_node_id,
)
from ..utils.logger import app_logger
from ..utils.paths import basename


def extract_file(registry: ExtractorRegistry, file: SourceFile, logger=app_logger) -> Optional[ExtractionResult]:
    """Run the matching extractor over one file.

    Returns None when the extension is not registered or extraction fails;
    failures are logged and never propagate.
    """
    extractor = registry.for_path(file.path)
    if extractor is None:
        logger.debug(f"No extractor registered for {file.path}, skipping")
        return None

    try:
        return extractor.parse(file.content, file.path)
    except Exception as e:
        logger.warning(f"Failed to parse {file.path}: {e}")
        return None


def ensure_module_node(nodes: List[Node], file_path: str, known_ids: Set[str]):
    """Append a module node for ``file_path`` unless one already exists."""
    module_id = module_node_id(file_path)
    if module_id in known_ids:
        return
    nodes.append(Node(
        id=module_id,
        name=basename(file_path),
        type=NodeType.MODULE,
        file_path=file_path,
    ))
    known_ids.add(module_id)


def dedupe_nodes(nodes: Iterable[Node]) -> List[Node]:
    """Drop repeated node ids, keeping the first occurrence."""
    unique: Dict[str, Node] = {}
    for node in nodes:
        unique.setdefault(node.id, node)
    return list(unique.values())


def dedupe_edges(edges: Iterable[Edge]) -> List[Edge]:
    """Drop repeated edge ids, keeping the first occurrence."""
    unique: Dict[str, Edge] = {}
    for edge in edges:
        unique.setdefault(edge.id, edge)
    return list(unique.values())


def prune_dangling_edges(nodes: Iterable[Node], edges: Iterable[Edge]) -> List[Edge]:
    """Keep only edges whose source and target are both present."""
    node_ids = {node.id for node in nodes}
    return [edge for edge in edges if edge.source in node_ids and edge.target in node_ids]


class KnowledgeGraphBuilder:
    """Parses source files and merges their facts into one graph."""

    def __init__(self, registry: Optional[ExtractorRegistry] = None, max_files: Optional[int] = None):
        self.registry = registry if registry is not None else default_registry()
        self.max_files = max_files if max_files is not None else settings.max_files
        self.logger = app_logger.bind(component="graph_builder")

    def add_extractor(self, extension: str, extractor: BaseExtractor):
        """Add a custom extractor for a specific file extension."""
        self.registry.register(extension, extractor)

    def build_file(self, file: FileInput) -> Optional[ExtractionResult]:
        """Builds the nodes and edges for a single file."""
        return extract_file(self.registry, as_source_file(file), self.logger)

    def build(self, files: Iterable[FileInput]) -> KnowledgeGraph:
        """
        Build a knowledge graph from the provided files.

        Files with an unregistered extension are skipped; files whose
        extraction fails are logged and left out of the graph.
        """
        source_files = [as_source_file(file) for file in files]
        if len(source_files) > self.max_files:
            self.logger.warning(
                f"Received {len(source_files)} files, only the first {self.max_files} will be processed"
            )
            source_files = source_files[:self.max_files]

        all_nodes: List[Node] = []
        all_edges: List[Edge] = []
        processed: Dict[str, None] = {}

        for file in source_files:
            if file.content is None:
                self.logger.debug(f"No content for {file.path}, skipping")
                continue

            result = self.build_file(file)
            if result is None:
                continue

            all_nodes.extend(result.nodes)
            all_edges.extend(result.edges)
            processed[file.path] = None

        nodes = dedupe_nodes(all_nodes)
        known_ids = {node.id for node in nodes}
        for file_path in processed:
            ensure_module_node(nodes, file_path, known_ids)

        edges = dedupe_edges(all_edges)
        pruned = prune_dangling_edges(nodes, edges)
        if len(pruned) != len(edges):
            self.logger.debug(f"Pruned {len(edges) - len(pruned)} dangling edges")

        graph = KnowledgeGraph(nodes=nodes, edges=pruned)
        self.logger.info(
            f"Built graph from {len(processed)}/{len(source_files)} files: "
            f"{len(graph.nodes)} nodes, {len(graph.edges)} edges"
        )
        return graph

    def analyze_change_impact(self, graph: KnowledgeGraph, node_id: str) -> List[ImpactResult]:
        """Analyze the impact of changes to a specific node."""
        return analyze_impact(graph, node_id)

    def detect_cycles(self, graph: KnowledgeGraph) -> CycleDetectionResult:
        """Detect cycles in the knowledge graph."""
        return detect_cycles(graph)
