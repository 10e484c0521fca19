"""Turns matched dependency statements into Dependency records."""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ..config import RuntimeGroups, normalize_group_name
from ..requirement import parse_requirement
from .base import Dependency, DependencyType
from .context import DEFAULT_GROUPS, GroupContextStack
from .statements import GEMSPEC_DEPENDENCY_METHODS, Statement, StatementKind

# Options that point a gem at a source this parser cannot resolve
SOURCE_OPTIONS = frozenset({"git", "github", "gist", "bitbucket", "path"})
GROUP_OPTIONS = ("group", "groups")
DEVELOPMENT_GROUPS: Tuple[str, ...] = ("development",)


class DependencyBuilder:
    """Combines a dependency statement with the active group context."""

    def __init__(self, runtime_groups: RuntimeGroups, source_file: Optional[Path] = None) -> None:
        """Initialize the builder.

        Args:
            runtime_groups: Groups classified as runtime
            source_file: File the statements come from, if any
        """
        self.runtime_groups = runtime_groups
        self.source_file = source_file

    def build(
        self,
        statement: Statement,
        context: GroupContextStack,
        line: int
    ) -> Optional[Dependency]:
        """Build a dependency record, or None when it must be skipped.

        Args:
            statement: A DEPENDENCY statement
            context: Current nesting state
            line: 1-based line number of the statement

        Returns:
            Dependency, or None for excluded sources
        """
        if statement.kind is not StatementKind.DEPENDENCY:
            raise ValueError(f"Cannot build a dependency from a {statement.kind.value} statement")

        if context.current_excluded() or SOURCE_OPTIONS.intersection(statement.options):
            return None

        groups = self._resolve_groups(statement, context)
        dependency_type = (
            DependencyType.RUNTIME
            if self.runtime_groups.is_runtime(groups)
            else DependencyType.DEVELOPMENT
        )

        return Dependency(
            name=statement.name,
            requirement=parse_requirement(statement.constraints),
            type=dependency_type,
            groups=groups,
            line=line,
            source_file=self.source_file,
            options=_extra_options(statement.options)
        )

    def _resolve_groups(self, statement: Statement, context: GroupContextStack) -> Tuple[str, ...]:
        kind = GEMSPEC_DEPENDENCY_METHODS.get(statement.method)
        if kind == "development":
            return DEVELOPMENT_GROUPS
        if kind == "runtime":
            return DEFAULT_GROUPS

        # an explicit :group/:groups option replaces the enclosing block's groups
        for key in GROUP_OPTIONS:
            if key in statement.options:
                groups = _normalize_groups(statement.options[key])
                if groups:
                    return groups

        return context.current_groups()


def _normalize_groups(value: Any) -> Tuple[str, ...]:
    values = value if isinstance(value, list) else [value]
    groups = []
    for item in values:
        if not isinstance(item, str):
            continue
        name = normalize_group_name(item)
        if name and name not in groups:
            groups.append(name)
    return tuple(groups)


def _extra_options(options: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in options.items() if key not in GROUP_OPTIONS}
