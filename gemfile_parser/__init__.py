"""gemfile-parser - Extract dependencies from Gemfiles and gemspecs without running Ruby."""

__version__ = "0.1.0"

from .core.config import ParserConfig, RuntimeGroups, runtime_groups
from .core.parsers import (
    Dependency,
    DependencyParser,
    DependencyType,
    GemfileParser,
    GemspecParser,
    ParsedManifest,
    ParseMode,
    parse,
)
from .core.requirement import Requirement
from .output.formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "parse",
    "Dependency",
    "DependencyParser",
    "DependencyType",
    "GemfileParser",
    "GemspecParser",
    "ParsedManifest",
    "ParseMode",
    "ParserConfig",
    "Requirement",
    "RuntimeGroups",
    "runtime_groups",
    "ConsoleFormatter",
    "JSONFormatter",
]
