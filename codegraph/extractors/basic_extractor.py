from ..types import ExtractionResult
from ..utils.paths import extname
from .base import BaseExtractor, FileGraph


class BasicExtractor(BaseExtractor):
    """Fallback extractor: the file module node only, no deeper structure."""

    def __init__(self, language: str = "text"):
        self.language = language

    def extract(self, code: str, file_path: str) -> ExtractionResult:
        return FileGraph(file_path, self.language or extname(file_path).lstrip(".")).result()
