"""
Shared utilities: logging and path helpers.
"""
from .logger import app_logger, setup_logging
from .paths import basename, extname, is_same_or_child, normalize_extension, sanitize_identifier

__all__ = [
    "app_logger",
    "setup_logging",
    "basename",
    "extname",
    "is_same_or_child",
    "normalize_extension",
    "sanitize_identifier",
]
