"""Shared helpers: parse diagnostics and file I/O."""

from .diagnostics import ParseDiagnostics, SkippedEntry
from .file_utils import read_text_file, write_text_atomic

__all__ = ["ParseDiagnostics", "SkippedEntry", "read_text_file", "write_text_atomic"]
