"""Core parsing and requirement logic for gemfile-parser."""

from .config import ParserConfig, RuntimeGroups, runtime_groups
from .parsers import Dependency, DependencyParser, DependencyType, ParsedManifest, ParseMode, parse
from .requirement import Requirement, parse_requirement

__all__ = [
    "ParserConfig",
    "RuntimeGroups",
    "runtime_groups",
    "Dependency",
    "DependencyParser",
    "DependencyType",
    "ParsedManifest",
    "ParseMode",
    "parse",
    "Requirement",
    "parse_requirement",
]
