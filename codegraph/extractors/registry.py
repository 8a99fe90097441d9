"""
Extension -> extractor registry.

A registry is an ordinary object owned by (or injected into) the builder and
the incremental updater; there is no process-wide instance. Tests build their
own registries with fakes.
"""

from typing import Dict, Iterator, List, Optional

from ..utils.paths import extname, normalize_extension
from .base import BaseExtractor
from .basic_extractor import BasicExtractor
from .java_extractor import JavaExtractor
from .python_extractor import PythonExtractor


EXTENSION_LANGUAGES: Dict[str, str] = {
    '.py': 'python',
    '.java': 'java',
    '.js': 'javascript',
    '.jsx': 'jsx',
    '.ts': 'typescript',
    '.tsx': 'tsx',
    '.c': 'c',
    '.cpp': 'cpp',
    '.cs': 'csharp',
    '.rb': 'ruby',
    '.php': 'php',
    '.go': 'go',
    '.rs': 'rust',
    '.kt': 'kotlin',
    '.swift': 'swift',
    '.scala': 'scala',
    '.dart': 'dart',
    '.html': 'html',
    '.css': 'css',
    '.scss': 'scss',
    '.sql': 'sql',
    '.json': 'json',
    '.yaml': 'yaml',
    '.yml': 'yaml',
    '.xml': 'xml',
    '.md': 'markdown',
}


class ExtractorRegistry:
    """Maps lower-case file extensions (with leading dot) to extractors."""

    def __init__(self, extractors: Optional[Dict[str, BaseExtractor]] = None):
        self._extractors: Dict[str, BaseExtractor] = {}
        for ext, extractor in (extractors or {}).items():
            self.register(ext, extractor)

    def register(self, extension: str, extractor: BaseExtractor):
        """Register (or replace) the extractor for ``extension``."""
        ext = normalize_extension(extension)
        if not ext:
            raise ValueError("extension must not be empty")
        self._extractors[ext] = extractor

    def unregister(self, extension: str) -> Optional[BaseExtractor]:
        return self._extractors.pop(normalize_extension(extension), None)

    def get(self, extension: str) -> Optional[BaseExtractor]:
        return self._extractors.get(normalize_extension(extension))

    def for_path(self, file_path: str) -> Optional[BaseExtractor]:
        """Select the extractor for a file by its extension."""
        ext = extname(file_path).lower()
        if not ext:
            return None
        return self._extractors.get(ext)

    def extensions(self) -> List[str]:
        return sorted(self._extractors)

    def copy(self) -> "ExtractorRegistry":
        return ExtractorRegistry(dict(self._extractors))

    def __contains__(self, extension: str) -> bool:
        return normalize_extension(extension) in self._extractors

    def __len__(self) -> int:
        return len(self._extractors)

    def __iter__(self) -> Iterator[str]:
        return iter(self.extensions())

    def __repr__(self) -> str:
        return f"ExtractorRegistry(extensions={self.extensions()})"


def default_registry() -> ExtractorRegistry:
    """Build a fresh registry with the built-in extractors."""
    registry = ExtractorRegistry()
    python = PythonExtractor()
    java = JavaExtractor()
    for ext, language in EXTENSION_LANGUAGES.items():
        if ext == '.py':
            registry.register(ext, python)
        elif ext == '.java':
            registry.register(ext, java)
        else:
            registry.register(ext, BasicExtractor(language))
    return registry
