"""Exception hierarchy for codegraph."""


class CodeGraphError(Exception):
    """Base exception for all codegraph errors."""


class ExtractionError(CodeGraphError):
    """Raised by an extractor when a file cannot be processed."""

    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        super().__init__(f"{file_path}: {message}")


class GraphSerializationError(CodeGraphError):
    """Raised when a graph cannot be read from or written to JSON."""
