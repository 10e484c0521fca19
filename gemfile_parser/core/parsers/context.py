"""Nesting state for the Gemfile scanner."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from ...utils.logging import get_logger
from ..config import DEFAULT_GROUP, normalize_group_name

DEFAULT_GROUPS: Tuple[str, ...] = (DEFAULT_GROUP,)


class FrameKind(str, Enum):
    """What opened a frame."""

    GROUP = "group"
    SOURCE = "source"
    BLOCK = "block"


@dataclass(frozen=True)
class Frame:
    """One level of block nesting."""

    kind: FrameKind
    groups: Tuple[str, ...]
    excluded: bool


class GroupContextStack:
    """Tracks active groups and source exclusion while lines are scanned.

    ``group`` frames replace the active groups, ``git``/``path`` frames mark
    everything below them as excluded, and plain blocks inherit both from
    their parent.
    """

    def __init__(self) -> None:
        self._frames: List[Frame] = []
        self.logger = get_logger("GroupContextStack")

    def open(self, kind: FrameKind, groups: Optional[Iterable[str]] = None) -> Frame:
        """Push a frame for a block opener.

        Args:
            kind: Kind of block being opened
            groups: Group names, used by GROUP frames only

        Returns:
            The pushed frame
        """
        kind = FrameKind(kind)
        parent_groups = self.current_groups()
        parent_excluded = self.current_excluded()

        if kind is FrameKind.GROUP:
            names = _unique(normalize_group_name(g) for g in groups or ())
            frame = Frame(kind, names or parent_groups, parent_excluded)
        elif kind is FrameKind.SOURCE:
            frame = Frame(kind, parent_groups, True)
        else:
            frame = Frame(kind, parent_groups, parent_excluded)

        self._frames.append(frame)
        return frame

    def close(self) -> bool:
        """Pop the innermost frame.

        Returns:
            False if there was nothing to close; the stack is left as is
        """
        if not self._frames:
            self.logger.warning("Ignoring 'end' without a matching block")
            return False

        self._frames.pop()
        return True

    def current_groups(self) -> Tuple[str, ...]:
        if not self._frames:
            return DEFAULT_GROUPS
        return self._frames[-1].groups

    def current_excluded(self) -> bool:
        if not self._frames:
            return False
        return self._frames[-1].excluded

    @property
    def depth(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)
