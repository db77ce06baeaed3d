"""
Edge
====
Edge value type and its tri-state status.

- NORMAL: not decided yet
- MARKED: part of the loop
- DISABLED: not part of the loop
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class EdgeState(IntEnum):
    NORMAL = 0
    MARKED = 1
    DISABLED = 2

    @property
    def is_enabled(self) -> bool:
        return self is not EdgeState.DISABLED


@dataclass(frozen=True)
class Edge:
    """
    An edge between two vertex indices.

    ``start`` is always the lower index so that two edges between the same
    vertices compare equal regardless of the order they were created in.
    """
    start: int
    end: int
    state: EdgeState = EdgeState.NORMAL

    def __post_init__(self):
        if self.start > self.end:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @property
    def vertices(self):
        return self.start, self.end

    def shares_vertex(self, other: "Edge") -> bool:
        return (
            self.start == other.start or self.start == other.end
            or self.end == other.start or self.end == other.end
        )

    def shared_vertex(self, other: "Edge"):
        """Return the vertex index both edges share, or None."""
        if self.start == other.start or self.start == other.end:
            return self.start
        if self.end == other.start or self.end == other.end:
            return self.end
        return None

    def matches_coordinates(self, other: "Edge") -> bool:
        """Compare vertex pairs only, ignoring state."""
        return self.start == other.start and self.end == other.end

    def with_state(self, state: EdgeState) -> "Edge":
        return Edge(self.start, self.end, state)
