"""
codegraph - a knowledge graph of source code structure.

Extractors turn one file into nodes and edges; the builder merges them into a
graph; the incremental updater replaces the fragments of changed files; the
analyses detect dependency cycles and estimate the impact of a change.
"""

from .analysis import ChangeImpactAnalyzer, CycleDetector, analyze_impact, detect_cycles, group_impact
from .exceptions import CodeGraphError, ExtractionError, GraphSerializationError
from .extractors import (
    BaseExtractor,
    BasicExtractor,
    ExtractorRegistry,
    JavaExtractor,
    PythonExtractor,
    default_registry,
)
from .graph import (
    IncrementalGraphUpdater,
    KnowledgeGraphBuilder,
    graph_from_json,
    graph_to_json,
    load_graph,
    save_graph,
    update_graph,
)
from .types import (
    CycleDetectionResult,
    Edge,
    EdgeType,
    ExtractionResult,
    FileSource,
    ImpactLevel,
    ImpactResult,
    KnowledgeGraph,
    Node,
    NodeType,
    SourceFile,
)

__version__ = "0.1.0"

__all__ = [
    "ChangeImpactAnalyzer",
    "CycleDetector",
    "analyze_impact",
    "detect_cycles",
    "group_impact",
    "CodeGraphError",
    "ExtractionError",
    "GraphSerializationError",
    "BaseExtractor",
    "BasicExtractor",
    "ExtractorRegistry",
    "JavaExtractor",
    "PythonExtractor",
    "default_registry",
    "IncrementalGraphUpdater",
    "KnowledgeGraphBuilder",
    "graph_from_json",
    "graph_to_json",
    "load_graph",
    "save_graph",
    "update_graph",
    "CycleDetectionResult",
    "Edge",
    "EdgeType",
    "ExtractionResult",
    "FileSource",
    "ImpactLevel",
    "ImpactResult",
    "KnowledgeGraph",
    "Node",
    "NodeType",
    "SourceFile",
    "__version__",
]
