"""
Command-line interface: build, inspect and incrementally update a knowledge graph.

Results go to stdout as JSON; logs go to stderr.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .analysis import analyze_impact, detect_cycles, group_impact
from .config import settings
from .exceptions import CodeGraphError
from .graph import IncrementalGraphUpdater, KnowledgeGraphBuilder, load_graph, save_graph
from .scanner import LocalCodebaseScanner
from .types import KnowledgeGraph, SourceFile
from .utils.logger import app_logger, setup_logging


def _print_json(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _relative_to_root(root: Path, path: str) -> str:
    """Express a changed path the way the scanner names files; the root itself is ``""``."""
    candidate = Path(path)
    if candidate.is_absolute():
        try:
            candidate = candidate.resolve().relative_to(root)
        except ValueError:
            return candidate.as_posix()
    relative = candidate.as_posix()
    return "" if relative == "." else relative


def _changed_files(scanner: LocalCodebaseScanner, graph: KnowledgeGraph, paths: List[str]) -> List[SourceFile]:
    """
    Turn changed paths into source files for the updater.

    A directory stands for every file beneath it: its path (or, for the root,
    every file already in the graph) is listed without content so files deleted
    from it drop out, followed by the files still on disk.
    """
    files: List[SourceFile] = []
    for path in paths:
        if not (scanner.root_path / path).is_dir():
            files.append(scanner.read_file(path))
            continue

        if path:
            files.append(SourceFile(path=path))
        else:
            files.extend(SourceFile(path=file_path) for file_path in graph.file_paths())
        files.extend(scanner.read_files(scanner.scan_directory(path or None)))
    return files


def cmd_build(args) -> int:
    scanner = LocalCodebaseScanner(args.root)
    builder = KnowledgeGraphBuilder()
    graph = builder.build(scanner.iter_files())

    output = save_graph(graph, args.output or settings.graph_output)
    app_logger.info(f"Graph written to {output}")
    _print_json(graph.statistics())
    return 0


def cmd_cycles(args) -> int:
    graph = load_graph(args.graph)
    _print_json(detect_cycles(graph).to_dict())
    return 0


def cmd_impact(args) -> int:
    graph = load_graph(args.graph)
    if graph.get_node(args.node_id) is None:
        app_logger.warning(f"Node {args.node_id} is not in the graph")

    results = analyze_impact(graph, args.node_id)
    if args.grouped:
        grouped = group_impact(results)
        _print_json({level: [node.to_dict() for node in nodes] for level, nodes in grouped.items()})
    else:
        _print_json([result.to_dict() for result in results])
    return 0


def cmd_update(args) -> int:
    graph = load_graph(args.graph)
    scanner = LocalCodebaseScanner(args.root)
    changed = [_relative_to_root(scanner.root_path, path) for path in args.changed]
    files = _changed_files(scanner, graph, changed)

    updated = IncrementalGraphUpdater().update_graph(graph, files)

    output = save_graph(updated, args.output or args.graph)
    app_logger.info(f"Updated graph written to {output}")
    _print_json(updated.statistics())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="codegraph", description="Code knowledge graph builder")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Scan a directory and build its graph")
    build.add_argument("root", help="Root directory to scan")
    build.add_argument("-o", "--output", help=f"Output JSON file (default: {settings.graph_output})")
    build.set_defaults(func=cmd_build)

    cycles = subparsers.add_parser("cycles", help="Report cycles in a saved graph")
    cycles.add_argument("graph", help="Graph JSON file")
    cycles.set_defaults(func=cmd_cycles)

    impact = subparsers.add_parser("impact", help="Report nodes affected by changing a node")
    impact.add_argument("graph", help="Graph JSON file")
    impact.add_argument("node_id", help="Id of the changed node")
    impact.add_argument("--grouped", action="store_true", help="Group results by impact level")
    impact.set_defaults(func=cmd_impact)

    update = subparsers.add_parser("update", help="Re-extract changed files into a saved graph")
    update.add_argument("graph", help="Graph JSON file")
    update.add_argument("root", help="Root directory the graph was built from")
    update.add_argument("changed", nargs="+", help="Changed (or deleted) file paths")
    update.add_argument("-o", "--output", help="Output JSON file (default: overwrite the input)")
    update.set_defaults(func=cmd_update)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the codegraph command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, settings.log_file)

    try:
        return args.func(args)
    except CodeGraphError as e:
        app_logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        app_logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
