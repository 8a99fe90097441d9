"""
Structural extractors: one per language, selected by file extension.
"""

from .base import BaseExtractor, FileGraph
from .basic_extractor import BasicExtractor
from .java_extractor import JavaExtractor
from .python_extractor import PythonExtractor
from .registry import EXTENSION_LANGUAGES, ExtractorRegistry, default_registry

__all__ = [
    "BaseExtractor",
    "FileGraph",
    "BasicExtractor",
    "JavaExtractor",
    "PythonExtractor",
    "EXTENSION_LANGUAGES",
    "ExtractorRegistry",
    "default_registry",
]
