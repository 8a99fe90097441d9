"""
Scanner module - reads source files from disk for the graph builder.
"""
from .local_codebase_scanner import DEFAULT_IGNORED_DIRS, LocalCodebaseScanner

__all__ = ["DEFAULT_IGNORED_DIRS", "LocalCodebaseScanner"]
