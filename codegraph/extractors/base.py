"""
Base extractor interface and the per-file accumulator shared by extractors.

An extractor maps ``(source text, file path)`` to the nodes and edges of that
single file. Extractors are pure: the same input always produces the same
output, which is what keeps node ids stable across rebuilds. They are heuristic
line scanners, not parsers; a language can be given an AST-backed extractor
later without touching the builder or the analyses.
"""

import dataclasses
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..exceptions import ExtractionError
from ..types import (
    Edge,
    EdgeType,
    ExtractionResult,
    Node,
    NodeType,
    edge_id,
    module_node_id,
    symbol_node_id,
)
from ..utils.paths import basename, sanitize_identifier


class BaseExtractor(ABC):
    """Abstract base class for language-specific extractors."""

    language: str = "text"

    def parse(self, code: str, file_path: str) -> ExtractionResult:
        """Extract the nodes and edges of one file.

        Raises:
            ExtractionError: if ``code`` is not text.
        """
        if not isinstance(code, str):
            raise ExtractionError(file_path, f"expected text content, got {type(code).__name__}")
        return self.extract(code, file_path)

    @abstractmethod
    def extract(self, code: str, file_path: str) -> ExtractionResult:
        """Language-specific extraction over validated text."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(language={self.language!r})"


class FileGraph:
    """Accumulates the nodes and edges of a single file in discovery order.

    Node and edge ids are unique; the first definition of an id wins.
    """

    def __init__(self, file_path: str, language: str):
        self.file_path = file_path
        self.language = language
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}
        self.functions: Dict[str, str] = {}
        self.classes: Dict[str, str] = {}
        self.variables: Dict[str, str] = {}

        self.module_id = module_node_id(file_path)
        self._add(Node(
            id=self.module_id,
            name=basename(file_path),
            type=NodeType.MODULE,
            file_path=file_path,
            properties={"language": language},
        ))

    def _add(self, node: Node) -> str:
        if node.id not in self._nodes:
            self._nodes[node.id] = node
        return node.id

    def add_symbol(self, node_type: NodeType, name: str, qualified_name: str,
                   line: int, **properties) -> str:
        """Add a class, function or variable node and index it by name."""
        node_id = symbol_node_id(self.file_path, qualified_name)
        if node_id in self._nodes:
            return node_id

        self._add(Node(
            id=node_id,
            name=name,
            type=node_type,
            file_path=self.file_path,
            line_start=line,
            properties=properties,
        ))

        index = {
            NodeType.FUNCTION: self.functions,
            NodeType.CLASS: self.classes,
            NodeType.VARIABLE: self.variables,
        }.get(node_type)
        if index is not None:
            index.setdefault(name, node_id)
        return node_id

    def function_id(self, node_id: str) -> Optional[str]:
        """Return ``node_id`` if it names a function already added to this file."""
        node = self._nodes.get(node_id)
        if node is not None and node.type == NodeType.FUNCTION:
            return node_id
        return None

    def close_symbol(self, node_id: str, line_end: int):
        """Record where a class or function body ends."""
        node = self._nodes.get(node_id)
        if node is not None and node.line_end is None:
            self._nodes[node_id] = dataclasses.replace(node, line_end=max(line_end, node.line_start or line_end))

    def add_import(self, module_name: str, line: int) -> str:
        """Add an import-target node and its edge into the file module node."""
        node_id = f"{self.file_path}#import_{sanitize_identifier(module_name)}"
        self._add(Node(
            id=node_id,
            name=module_name,
            type=NodeType.MODULE,
            file_path=self.file_path,
            line_start=line,
            properties={"import": True},
        ))
        import_edge_id = f"{node_id}_to_module"
        if import_edge_id not in self._edges:
            self._edges[import_edge_id] = Edge(
                id=import_edge_id,
                source=node_id,
                target=self.module_id,
                type=EdgeType.IMPORT,
                properties={"line": line},
            )
        return node_id

    def add_edge(self, source: str, target: str, edge_type: EdgeType, line: Optional[int] = None):
        new_id = edge_id(source, target, edge_type)
        if new_id in self._edges:
            return
        properties = {"line": line} if line is not None else {}
        self._edges[new_id] = Edge(
            id=new_id,
            source=source,
            target=target,
            type=edge_type,
            properties=properties,
        )

    def result(self) -> ExtractionResult:
        return ExtractionResult(nodes=list(self._nodes.values()), edges=list(self._edges.values()))
