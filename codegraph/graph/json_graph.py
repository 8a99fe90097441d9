from typing import Any, Dict, Union
import json
from pathlib import Path

from ..exceptions import GraphSerializationError
from ..types import Edge, KnowledgeGraph, Node
from ..utils.logger import app_logger
from .graph_builder import dedupe_edges, dedupe_nodes, prune_dangling_edges

logger = app_logger.bind(component="json_graph")


def graph_to_json(graph: KnowledgeGraph, indent: int = 2) -> str:
    """Serialize a graph as a JSON object with ``nodes`` and ``edges``."""
    return json.dumps(graph.to_dict(), indent=indent, ensure_ascii=False)


def graph_from_dict(data: Dict[str, Any]) -> KnowledgeGraph:
    """Rebuild a graph from its dictionary form, pruning dangling edges."""
    if not isinstance(data, dict) or "nodes" not in data or "edges" not in data:
        raise GraphSerializationError("graph data must be an object with 'nodes' and 'edges'")

    try:
        nodes = dedupe_nodes(Node.from_dict(item) for item in data["nodes"])
        edges = dedupe_edges(Edge.from_dict(item) for item in data["edges"])
    except (KeyError, TypeError, ValueError) as e:
        raise GraphSerializationError(f"invalid graph record: {e}") from e

    pruned = prune_dangling_edges(nodes, edges)
    if len(pruned) != len(edges):
        logger.warning(f"Dropped {len(edges) - len(pruned)} dangling edges while loading graph")
    return KnowledgeGraph(nodes=nodes, edges=pruned)


def graph_from_json(text: str) -> KnowledgeGraph:
    """Parse a graph from its JSON form."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GraphSerializationError(f"invalid JSON: {e}") from e
    return graph_from_dict(data)


def save_graph(graph: KnowledgeGraph, path: Union[str, Path]) -> Path:
    """Write a graph to ``path`` as UTF-8 JSON."""
    storage_path = Path(path)
    try:
        storage_path.parent.mkdir(parents=True, exist_ok=True)
        with open(storage_path, 'w', encoding='utf-8') as f:
            f.write(graph_to_json(graph))
    except OSError as e:
        raise GraphSerializationError(f"Error saving graph data to {storage_path}: {e}") from e
    logger.debug(f"Saved graph data to {storage_path}")
    return storage_path


def load_graph(path: Union[str, Path]) -> KnowledgeGraph:
    """Read a graph previously written by :func:`save_graph`."""
    storage_path = Path(path)
    try:
        with open(storage_path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise GraphSerializationError(f"Error loading graph data from {storage_path}: {e}") from e

    graph = graph_from_json(text)
    logger.info(f"Loaded graph data from {storage_path}")
    return graph
