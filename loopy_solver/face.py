"""
Face
====
A polygonal face of a Loopy grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Face:
    """
    Ordered cycle of vertex indices with an optional hint.

    Local edge ``i`` joins ``indices[i]`` and ``indices[(i + 1) % n]``;
    ``local_to_global_edges[i]`` is the id of that edge in the grid.
    """
    indices: List[int]
    local_to_global_edges: List[int] = field(default_factory=list)
    hint: Optional[int] = None

    @property
    def edge_count(self) -> int:
        return len(self.indices)

    @property
    def is_semicomplete(self) -> bool:
        return self.hint is not None and self.hint == self.edge_count - 1

    def contains_vertex(self, vertex: int) -> bool:
        return vertex in self.indices

    def contains_edge(self, edge_id: int) -> bool:
        return edge_id in self.local_to_global_edges

    def local_edge_vertices(self, local_index: int):
        n = len(self.indices)
        return self.indices[local_index], self.indices[(local_index + 1) % n]
