import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set
from concurrent.futures import ThreadPoolExecutor

from ..config import settings
from ..types import SourceFile
from ..utils.logger import app_logger


DEFAULT_IGNORED_DIRS = {
    '.git', '.venv', 'venv', 'env', '__pycache__', 'node_modules',
    '.idea', '.vscode', '.pytest_cache', '.mypy_cache', 'build', 'dist',
    '.next', '.cache',
}


class LocalCodebaseScanner:
    """Reads a local directory tree into SourceFile objects for the graph builder."""

    def __init__(self, root_path: Optional[str] = None,
                 extensions: Optional[Iterable[str]] = None,
                 ignored_dirs: Optional[Set[str]] = None,
                 max_file_size: Optional[int] = None):
        if root_path is None:
            self.root_path = Path.cwd().resolve()
        else:
            self.root_path = Path(root_path).resolve()

        if extensions is None:
            extensions = settings.supported_extensions_list
        self.supported_extensions = {ext.lower() for ext in extensions}
        self.ignored_dirs = set(DEFAULT_IGNORED_DIRS if ignored_dirs is None else ignored_dirs)
        self.max_file_size = max_file_size if max_file_size is not None else settings.max_file_size
        self.logger = app_logger.bind(component="scanner")

    def scan_directory(self, subdirectory: Optional[str] = None) -> List[str]:
        """
        Return the relative paths of every file that passes the filters, sorted.

        With ``subdirectory`` only that part of the tree is walked; paths stay
        relative to the root.
        """
        if subdirectory and self.ignored_dirs.intersection(Path(subdirectory).parts):
            return []
        start = self.root_path / subdirectory if subdirectory else self.root_path
        self.logger.info(f"Scanning directory: {start}")
        paths = sorted(self._walk_directory(start))
        self.logger.info(f"Found {len(paths)} files to process")
        return paths

    def iter_files(self) -> Iterator[SourceFile]:
        """Yield every matching file with its content loaded."""
        for relative_path in self.scan_directory():
            source = self.read_file(relative_path)
            if source.content is not None:
                yield source

    def _walk_directory(self, start: Path) -> Iterator[str]:
        for root, dirs, files in os.walk(start):
            dirs[:] = [d for d in dirs if d not in self.ignored_dirs]

            for file_name in files:
                file_path = Path(root) / file_name
                if self._should_include_file(file_path):
                    yield self._relative(file_path)

    def _should_include_file(self, file_path: Path) -> bool:
        """Check if file should be included in scan."""
        if file_path.suffix.lower() not in self.supported_extensions:
            return False

        try:
            if file_path.stat().st_size > self.max_file_size:
                self.logger.warning(f"Skipping large file: {file_path}")
                return False
        except OSError:
            return False

        return True

    def _relative(self, file_path: Path) -> str:
        return file_path.relative_to(self.root_path).as_posix()

    def read_file(self, relative_path: str) -> SourceFile:
        """
        Read one file below the root.

        A file that no longer exists comes back with ``content=None`` so the
        incremental updater drops it from the graph.
        """
        absolute_path = self.root_path / relative_path
        if not absolute_path.is_file():
            return SourceFile(path=relative_path, content=None)
        try:
            with open(absolute_path, 'r', encoding='utf-8', errors='replace') as f:
                return SourceFile(path=relative_path, content=f.read())
        except OSError as e:
            self.logger.error(f"Error loading file {absolute_path}: {e}")
            return SourceFile(path=relative_path, content=None)

    def read_files(self, relative_paths: Iterable[str], max_workers: int = 4) -> List[SourceFile]:
        """Read several files in parallel, keeping the input order."""
        relative_paths = list(relative_paths)
        self.logger.info(f"Loading content for {len(relative_paths)} files")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.read_file, relative_paths))
