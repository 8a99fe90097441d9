import pytest
from pathlib import Path
from typing import Iterable, List, Tuple
import sys

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from codegraph.graph import KnowledgeGraphBuilder
from codegraph.types import Edge, EdgeType, KnowledgeGraph, Node, NodeType, edge_id


SAMPLE_PYTHON = '''"""Module docstring mentioning helper()."""
import os
import json as js, sys
from collections import OrderedDict
from . import views

LIMIT = 10


def helper(value):
    return value * LIMIT


class Base:
    pass


class Worker(Base):
    retries = 3

    def run(self):
        """Calls helper()."""
        return helper(self.retries)

    async def stop(self):
        pass


def main():
    worker = Worker()
    worker.run()
    print(helper(1))
'''


SAMPLE_JAVA = '''package com.example;

import java.util.List;
import java.util.ArrayList;

/* Block comment mentioning helper() */
public class Greeter {
    private final List<String> names = new ArrayList<>();

    public Greeter() {
    }

    private String format(String value) {
        return "Hello, " + value; // format(x) in comment
    }

    public String greet(String name) {
        names.add(name);
        return format(name);
    }
}

class LoudGreeter extends Greeter {
    public String shout(String name) {
        Greeter inner = new Greeter();
        return inner.greet(name).toUpperCase();
    }
}
'''


def make_graph(node_ids: Iterable[str], pairs: Iterable[Tuple[str, str]],
               edge_type: EdgeType = EdgeType.CALL) -> KnowledgeGraph:
    """Build a graph by hand: one function node per id, one edge per pair."""
    nodes = [
        Node(id=node_id, name=node_id, type=NodeType.FUNCTION, file_path="graph.py")
        for node_id in node_ids
    ]
    edges = [
        Edge(id=edge_id(source, target, edge_type), source=source, target=target, type=edge_type)
        for source, target in pairs
    ]
    return KnowledgeGraph(nodes=nodes, edges=edges)


def ids_of(nodes: Iterable[Node]) -> List[str]:
    return [node.id for node in nodes]


@pytest.fixture
def sample_python() -> str:
    """Python source exercising classes, methods, imports, variables and calls."""
    return SAMPLE_PYTHON


@pytest.fixture
def sample_java() -> str:
    """Java source exercising classes, constructors, fields, imports and calls."""
    return SAMPLE_JAVA


@pytest.fixture
def sample_files() -> List[Tuple[str, str]]:
    """A small multi-language batch of already-read files."""
    return [
        ("pkg/app.py", SAMPLE_PYTHON),
        ("pkg/util.py", "def square(x):\n    return x * x\n\n\ndef cube(x):\n    return square(x) * x\n"),
        ("src/Greeter.java", SAMPLE_JAVA),
        ("README.md", "# Sample\n\nNothing structural here.\n"),
    ]


@pytest.fixture
def builder() -> KnowledgeGraphBuilder:
    return KnowledgeGraphBuilder()


@pytest.fixture
def temp_codebase(tmp_path: Path) -> Path:
    """Create a temporary codebase on disk for scanner and CLI tests."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text(
        "def helper():\n    return 1\n\n\ndef main():\n    return helper()\n",
        encoding="utf-8",
    )
    (tmp_path / "src" / "Main.java").write_text(
        "public class Main {\n    public static void main(String[] args) {\n    }\n}\n",
        encoding="utf-8",
    )
    (tmp_path / "README.md").write_text("# Temp codebase\n", encoding="utf-8")
    (tmp_path / "logo.png").write_bytes(b"\x89PNG\r\n")

    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "index.js").write_text("function x() {}\n", encoding="utf-8")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "hooks.py").write_text("print('hook')\n", encoding="utf-8")
    (tmp_path / "__pycache__").mkdir()
    (tmp_path / "__pycache__" / "app.py").write_text("cached = True\n", encoding="utf-8")

    return tmp_path
