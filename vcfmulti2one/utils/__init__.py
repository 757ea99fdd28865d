"""Utility modules for infrastructure and helpers."""

from .memory_monitor import MemoryMonitor
from .logging_setup import setup_logger
from .indexing import index_output, infer_format_letter
from .validation import validate_cli_arguments

__all__ = [
    "MemoryMonitor",
    "setup_logger",
    "index_output",
    "infer_format_letter",
    "validate_cli_arguments",
]
