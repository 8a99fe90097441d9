#!/usr/bin/env python3
"""
Code knowledge graph - command-line entry point.

Builds a graph of modules, classes, functions and variables from a source
tree, then answers cycle and change-impact questions about it.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from codegraph.cli import main


if __name__ == "__main__":
    sys.exit(main())
