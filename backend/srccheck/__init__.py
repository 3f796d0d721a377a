"""Byte-level checker for tabs, non-Unix newlines, control characters and bad UTF-8."""

from .scanner import LineScanner, ScanResult, State, check_file, check_paths, scan_bytes
from .schema import Category, Incident

__version__ = "0.1.0"

__all__ = [
    "Category",
    "Incident",
    "LineScanner",
    "ScanResult",
    "State",
    "check_file",
    "check_paths",
    "scan_bytes",
]
