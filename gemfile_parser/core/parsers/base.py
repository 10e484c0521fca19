"""Base parser class and data models for Gemfile parsing."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from ..config import DEFAULT_GROUP
from ..requirement import Requirement


class ParseMode(str, Enum):
    """Which statement forms the scanner recognizes."""

    GEMFILE = "gemfile"
    GEMSPEC = "gemspec"

    @classmethod
    def coerce(cls, mode: Union["ParseMode", str]) -> "ParseMode":
        """Convert a mode name to a ParseMode.

        Args:
            mode: ParseMode or its string value

        Returns:
            Matching ParseMode

        Raises:
            ValueError: If the mode is not recognized
        """
        if isinstance(mode, ParseMode):
            return mode
        if isinstance(mode, str):
            for member in cls:
                if member.value == mode.strip().lower():
                    return member
        raise ValueError(f"Invalid parse mode: {mode!r} (expected 'gemfile' or 'gemspec')")


class DependencyType(str, Enum):
    """Classification derived from a dependency's groups."""

    RUNTIME = "runtime"
    DEVELOPMENT = "development"


@dataclass(frozen=True)
class Dependency:
    """A single gem dependency declared in a manifest."""

    name: str
    requirement: Requirement = field(default_factory=Requirement)
    type: DependencyType = DependencyType.RUNTIME
    groups: Tuple[str, ...] = (DEFAULT_GROUP,)
    line: int = 1
    source_file: Optional[Path] = None
    options: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        """Validate the dependency."""
        if not self.name or not self.name.strip():
            raise ValueError("Dependency name cannot be empty")
        if self.line < 1:
            raise ValueError(f"Line numbers start at 1, got {self.line}")

    def in_group(self, group: str) -> bool:
        return group.lstrip(":") in self.groups

    @property
    def is_runtime(self) -> bool:
        return self.type is DependencyType.RUNTIME

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the dependency for JSON output.

        Returns:
            Dictionary with plain JSON types
        """
        return {
            "name": self.name,
            "requirement": self.requirement.as_list(),
            "type": self.type.value,
            "groups": list(self.groups),
            "line": self.line,
            "source_file": str(self.source_file) if self.source_file else None,
            "options": self.options,
        }


@dataclass
class ParsedManifest:
    """Result of parsing a Gemfile or gemspec."""

    dependencies: List[Dependency] = field(default_factory=list)
    is_gemspec: bool = False
    gemspec_path: Optional[str] = None
    mode: ParseMode = ParseMode.GEMFILE
    source_file: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)

    def add_dependency(self, dependency: Dependency) -> None:
        """Add a dependency to the collection.

        Args:
            dependency: Dependency to add
        """
        self.dependencies.append(dependency)

    def get_dependency_names(self) -> Set[str]:
        return {dep.name for dep in self.dependencies}

    def find_dependency(self, name: str) -> Optional[Dependency]:
        """Find the first dependency declared with a given name.

        Args:
            name: Gem name to look up

        Returns:
            Dependency if found, None otherwise
        """
        for dep in self.dependencies:
            if dep.name == name:
                return dep
        return None

    def runtime_dependencies(self) -> List[Dependency]:
        return [dep for dep in self.dependencies if dep.type is DependencyType.RUNTIME]

    def development_dependencies(self) -> List[Dependency]:
        return [dep for dep in self.dependencies if dep.type is DependencyType.DEVELOPMENT]

    def groups(self) -> List[str]:
        """Union of all dependency groups, in first-seen order."""
        seen: List[str] = []
        for dep in self.dependencies:
            for group in dep.groups:
                if group not in seen:
                    seen.append(group)
        return seen


class BaseParser(ABC):
    """Abstract base class for manifest parsers."""

    def __init__(self) -> None:
        """Initialize the parser."""
        self.file_patterns: List[str] = []
        self.parser_type: str = ""

    @abstractmethod
    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if parser can handle the file
        """

    @abstractmethod
    def parse_text(self, text: str, source_file: Optional[Path] = None) -> ParsedManifest:
        """Parse manifest text already held in memory."""

    def parse(self, file_path: Path) -> ParsedManifest:
        """Parse a manifest file.

        Args:
            file_path: Path to the file to parse

        Returns:
            Parsed manifest
        """
        self.validate_file(file_path)

        with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
            text = f.read()

        return self.parse_text(text, source_file=file_path)

    def validate_file(self, file_path: Path) -> None:
        """Validate that the file exists and is readable.

        Args:
            file_path: Path to validate

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the path is not a regular file
            PermissionError: If file is not readable
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"File is not readable: {file_path}")
