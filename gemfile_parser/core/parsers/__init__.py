"""Parsers for Gemfiles and gemspecs."""

from .base import BaseParser, Dependency, DependencyType, ParsedManifest, ParseMode
from .gemfile import GemfileParser, GemspecParser, parse
from .registry import ParserRegistry
from .statements import Statement, StatementKind, locate_gemspec, match_statement

# Register built-in parsers
registry = ParserRegistry()
registry.register("gemfile", GemfileParser())
registry.register("gemspec", GemspecParser())

# Convenience exports
DependencyParser = registry
__all__ = [
    "BaseParser",
    "Dependency",
    "DependencyType",
    "ParsedManifest",
    "ParseMode",
    "GemfileParser",
    "GemspecParser",
    "DependencyParser",
    "ParserRegistry",
    "Statement",
    "StatementKind",
    "locate_gemspec",
    "match_statement",
    "parse",
    "registry",
]
