"""Version requirement model for gem dependencies."""

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from packaging import version as packaging_version
from packaging.version import Version

DEFAULT_CONSTRAINT = ">= 0"

# RubyGems operators, longest first so ">=" wins over ">"
_CONSTRAINT_PATTERN = re.compile(r'^\s*(~>|>=|<=|!=|=|>|<)?\s*(\S+)\s*$')


class Requirement:
    """An ordered set of version constraint strings.

    Constraints are kept as opaque text in the order they were written;
    ``as_list`` gives the sorted view used for display and comparison.
    """

    __slots__ = ("_constraints",)

    def __init__(self, constraints: Optional[Iterable[str]] = None) -> None:
        cleaned = tuple(c for c in (_clean(c) for c in constraints or ()) if c)
        self._constraints: Tuple[str, ...] = cleaned or (DEFAULT_CONSTRAINT,)

    @classmethod
    def default(cls) -> "Requirement":
        return cls()

    @property
    def constraints(self) -> Tuple[str, ...]:
        """Constraints in encounter order."""
        return self._constraints

    @property
    def list(self) -> List[str]:
        return self.as_list()

    def as_list(self) -> List[str]:
        """Return the constraints sorted lexically.

        Returns:
            Sorted list of constraint strings
        """
        return sorted(self._constraints)

    def is_default(self) -> bool:
        return self._constraints == (DEFAULT_CONSTRAINT,)

    def satisfied_by(self, version: str) -> bool:
        """Check if a concrete version satisfies every constraint.

        Args:
            version: Version string such as ``1.2.3``

        Returns:
            True if all constraints hold; False if they do not, or if the
            version or a constraint cannot be interpreted
        """
        try:
            candidate = Version(version)
        except packaging_version.InvalidVersion:
            return False

        for constraint in self._constraints:
            match = _CONSTRAINT_PATTERN.match(constraint)
            if not match:
                return False

            operator = match.group(1) or "="
            try:
                bound = Version(match.group(2))
            except packaging_version.InvalidVersion:
                return False

            if not _compare(candidate, operator, bound):
                return False

        return True

    def __str__(self) -> str:
        return ", ".join(self.as_list())

    def __repr__(self) -> str:
        return f"Requirement({list(self._constraints)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Requirement):
            return self.as_list() == other.as_list()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self.as_list()))

    def __iter__(self):
        return iter(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)


def parse_requirement(tokens: Sequence[str]) -> Requirement:
    """Build a Requirement from raw constraint tokens.

    Option pairs must already be filtered out. No semantic validation is
    done: malformed version strings pass through unchanged.

    Args:
        tokens: Constraint strings, possibly still quoted

    Returns:
        Requirement holding the tokens, or the ``>= 0`` default when empty
    """
    return Requirement(tokens)


def _clean(token: str) -> str:
    token = token.strip()
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "\"'":
        token = token[1:-1]
    return token.strip()


def _compare(candidate: Version, operator: str, bound: Version) -> bool:
    if operator == "=":
        return candidate == bound
    if operator == "!=":
        return candidate != bound
    if operator == ">":
        return candidate > bound
    if operator == "<":
        return candidate < bound
    if operator == ">=":
        return candidate >= bound
    if operator == "<=":
        return candidate <= bound
    # "~>": at least the bound, below the next release of its second-to-last segment
    return bound <= candidate < _bump(bound)


def _bump(bound: Version) -> Version:
    """Compute the exclusive upper limit of a pessimistic (~>) constraint."""
    release = list(bound.release)
    if len(release) > 1:
        release = release[:-1]
    release[-1] += 1
    return Version(".".join(str(part) for part in release))
