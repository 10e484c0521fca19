"""Parser configuration: runtime group classification and scan options."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Set

DEFAULT_GROUP = "default"


class RuntimeGroups:
    """Set of group names whose dependencies are classified as runtime.

    Every other group makes a dependency a development dependency. The set
    starts out as ``{"default"}`` and may be extended before parsing.
    """

    def __init__(self, groups: Optional[Iterable[str]] = None) -> None:
        """Initialize the runtime group set.

        Args:
            groups: Initial group names (defaults to ``default`` only)
        """
        self._groups: Set[str] = set()
        for group in groups if groups is not None else (DEFAULT_GROUP,):
            self.add(group)

    def add(self, group: str) -> None:
        """Register a group name as a runtime group.

        Args:
            group: Group name, with or without a leading colon
        """
        name = normalize_group_name(group)
        if not name:
            raise ValueError("Group name cannot be empty")
        self._groups.add(name)

    def reset(self) -> None:
        """Restore the default set, ``{"default"}``."""
        self._groups = {DEFAULT_GROUP}

    def is_runtime(self, groups: Iterable[str]) -> bool:
        """Check whether any of the given groups is a runtime group."""
        return any(normalize_group_name(group) in self._groups for group in groups)

    def copy(self) -> "RuntimeGroups":
        return RuntimeGroups(self._groups)

    def __contains__(self, group: object) -> bool:
        if not isinstance(group, str):
            return False
        return normalize_group_name(group) in self._groups

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._groups))

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self) -> str:
        return f"RuntimeGroups({sorted(self._groups)!r})"


def normalize_group_name(group: str) -> str:
    """Strip whitespace and a leading symbol colon from a group name."""
    return group.strip().lstrip(":").strip()


# Process-wide default, read by parse() when no explicit set is passed in.
runtime_groups = RuntimeGroups()


@dataclass
class ParserConfig:
    """Configuration for a scan run."""

    runtime_groups: RuntimeGroups = field(default_factory=lambda: runtime_groups.copy())
    include_gemspec: bool = True
    ignore_patterns: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not isinstance(self.runtime_groups, RuntimeGroups):
            raise ValueError("runtime_groups must be a RuntimeGroups instance")
        if len(self.runtime_groups) == 0:
            raise ValueError("At least one runtime group is required")

    @classmethod
    def from_options(
        cls,
        extra_runtime_groups: Optional[Iterable[str]] = None,
        include_gemspec: bool = True,
        ignore_patterns: Optional[Iterable[str]] = None
    ) -> "ParserConfig":
        """Build a configuration from CLI-style options.

        Args:
            extra_runtime_groups: Groups added on top of the default runtime set
            include_gemspec: Follow ``gemspec`` declarations to their files
            ignore_patterns: Additional path ignore patterns

        Returns:
            Parser configuration
        """
        groups = runtime_groups.copy()
        for group in extra_runtime_groups or []:
            groups.add(group)

        return cls(
            runtime_groups=groups,
            include_gemspec=include_gemspec,
            ignore_patterns=list(ignore_patterns or [])
        )
