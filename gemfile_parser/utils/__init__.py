"""Utility functions and helpers for gemfile-parser."""

from .logging import setup_logging, get_logger
from .path_utils import find_manifest_files, resolve_gemspec_files

__all__ = [
    "setup_logging",
    "get_logger",
    "find_manifest_files",
    "resolve_gemspec_files",
]
