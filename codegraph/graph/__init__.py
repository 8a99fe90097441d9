"""
Graph module - building, incrementally updating and serializing the knowledge graph.
"""
from .graph_builder import (
    KnowledgeGraphBuilder,
    dedupe_edges,
    dedupe_nodes,
    extract_file,
    prune_dangling_edges,
)
from .incremental import GraphUpdateState, IncrementalGraphUpdater, update_graph
from .json_graph import graph_from_dict, graph_from_json, graph_to_json, load_graph, save_graph

__all__ = [
    "KnowledgeGraphBuilder",
    "dedupe_edges",
    "dedupe_nodes",
    "extract_file",
    "prune_dangling_edges",
    "GraphUpdateState",
    "IncrementalGraphUpdater",
    "update_graph",
    "graph_from_dict",
    "graph_from_json",
    "graph_to_json",
    "load_graph",
    "save_graph",
]
