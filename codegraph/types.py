from typing import List, Dict, Any, Iterator, Optional, Protocol, Set, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum


class NodeType(str, Enum):
    """Node type enumeration."""
    MODULE = "module"
    CLASS = "class"
    FUNCTION = "function"
    VARIABLE = "variable"


class EdgeType(str, Enum):
    """Edge type enumeration."""
    IMPORT = "import"
    CALL = "call"
    INHERITANCE = "inheritance"
    DEPENDENCY = "dependency"
    USAGE = "usage"


class ImpactLevel(str, Enum):
    """How a node is reached from the changed node."""
    DIRECT = "direct"
    INDIRECT = "indirect"


@dataclass(frozen=True)
class SourceFile:
    """A file handed to the engine, already read. ``content=None`` marks a deleted file."""
    path: str
    content: Optional[str] = None


FileInput = Union[SourceFile, Tuple[str, Optional[str]]]


def as_source_file(file: FileInput) -> SourceFile:
    """Accept either a SourceFile or a ``(path, content)`` pair."""
    if isinstance(file, SourceFile):
        return file
    path, content = file
    return SourceFile(path=path, content=content)


class FileSource(Protocol):
    """Anything that hands already-read files to the engine."""

    def iter_files(self) -> Iterator[SourceFile]:
        ...


@dataclass(frozen=True)
class Node:
    """Represents a structural entity found in a source file."""
    id: str
    name: str
    type: NodeType
    file_path: str
    line_start: Optional[int] = None
    line_end: Optional[int] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "filePath": self.file_path,
        }
        if self.line_start is not None:
            data["lineStart"] = self.line_start
        if self.line_end is not None:
            data["lineEnd"] = self.line_end
        if self.properties:
            data["properties"] = dict(self.properties)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            id=data["id"],
            name=data["name"],
            type=NodeType(data["type"]),
            file_path=data["filePath"],
            line_start=data.get("lineStart"),
            line_end=data.get("lineEnd"),
            properties=dict(data.get("properties") or {}),
        )


@dataclass(frozen=True)
class Edge:
    """Represents a directed relation between two nodes."""
    id: str
    source: str
    target: str
    type: EdgeType
    properties: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type.value,
        }
        if self.properties:
            data["properties"] = dict(self.properties)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edge":
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            type=EdgeType(data["type"]),
            properties=dict(data.get("properties") or {}),
        )


@dataclass
class ExtractionResult:
    """Nodes and edges extracted from a single file."""
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)


@dataclass
class KnowledgeGraph:
    """The aggregate of all nodes and edges produced from a batch of files."""
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def node_ids(self) -> Set[str]:
        return {node.id for node in self.nodes}

    def edge_ids(self) -> Set[str]:
        return {edge.id for edge in self.edges}

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def file_paths(self) -> List[str]:
        """Distinct owning file paths, in first-seen order."""
        seen = {}
        for node in self.nodes:
            seen.setdefault(node.file_path, None)
        return list(seen)

    def file_module_nodes(self) -> List[Node]:
        """The ``<path>#module`` node of every file in the graph."""
        return [node for node in self.nodes if node.id == module_node_id(node.file_path)]

    def nodes_for_file(self, file_path: str) -> List[Node]:
        return [node for node in self.nodes if node.file_path == file_path]

    def edges_for_file(self, file_path: str) -> List[Edge]:
        """Edges whose source or target belongs to ``file_path``."""
        ids = {node.id for node in self.nodes_for_file(file_path)}
        return [edge for edge in self.edges if edge.source in ids or edge.target in ids]

    def copy(self) -> "KnowledgeGraph":
        """Shallow copy: new lists holding the same Node/Edge objects."""
        return KnowledgeGraph(nodes=list(self.nodes), edges=list(self.edges))

    def statistics(self) -> Dict[str, Any]:
        """Get graph statistics."""
        node_counts: Dict[str, int] = {}
        for node in self.nodes:
            node_counts[node.type.value] = node_counts.get(node.type.value, 0) + 1

        edge_counts: Dict[str, int] = {}
        for edge in self.edges:
            edge_counts[edge.type.value] = edge_counts.get(edge.type.value, 0) + 1

        return {
            "files": len(self.file_module_nodes()),
            "nodes": len(self.nodes),
            "edges": len(self.edges),
            "node_types": node_counts,
            "edge_types": edge_counts,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


@dataclass
class ImpactResult:
    """One impacted node. The list always holds exactly one node."""
    impacted_nodes: List[Node]
    impact_level: ImpactLevel

    @property
    def node(self) -> Node:
        return self.impacted_nodes[0]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "impacted_nodes": [node.to_dict() for node in self.impacted_nodes],
            "impact_level": self.impact_level.value,
        }


@dataclass
class CycleDetectionResult:
    """Cycles found in a graph, each a closed path of node ids."""
    cycles: List[List[str]]
    has_cycles: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "cycles": [list(cycle) for cycle in self.cycles],
            "hasCycles": self.has_cycles,
        }


def module_node_id(file_path: str) -> str:
    """Id of the module node every processed file owns."""
    return f"{file_path}#module"


def symbol_node_id(file_path: str, qualified_name: str) -> str:
    return f"{file_path}#{qualified_name}"


def edge_id(source: str, target: str, edge_type: EdgeType) -> str:
    return f"{source}_{edge_type.value}_{target}"
